# Services package init
"""
BeliLite Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the database / upstream API.

Service Inventory:
    - NoteService:  CRUD over the notes table, title validation
    - LLMService (abstract): Interface for text summarization providers
    - XAIService:   Concrete implementation using xAI's chat-completion API
"""
