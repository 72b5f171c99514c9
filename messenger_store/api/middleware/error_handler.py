"""
Error handling middleware
"""
from fastapi import FastAPI, HTTPException
from messenger_store.utils.exceptions import (
    StoreError, 
    store_error_handler,
    http_error_handler,
    general_error_handler
)

def add_error_handlers(app: FastAPI):
    """Add error handlers"""
    
    # Store errors (not found, conflicts, timeouts, blob failures)
    app.add_exception_handler(StoreError, store_error_handler)
    
    # HTTP error handling
    app.add_exception_handler(HTTPException, http_error_handler)
    
    # General error handling
    app.add_exception_handler(Exception, general_error_handler)
