import json
import traceback
from typing import Optional

class FeedMergeError(Exception):
    """Base exception for feedmerge"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ValidationError(FeedMergeError):
    """Bad configuration: sources file, settings, rewrite rules"""
    pass

class FetchError(FeedMergeError):
    """A single source could not be downloaded or parsed.

    Recovered by the orchestrator; never fatal for a run.
    """
    def __init__(self, message: str, url: Optional[str] = None, details: dict = None):
        details = dict(details or {})
        if url:
            details.setdefault("url", url)
        super().__init__(message, details)
        self.url = url

def format_error(e: Exception) -> str:
    """Format exception as the JSON error envelope printed by the CLI."""
    
    if isinstance(e, FeedMergeError):
        error_type = e.__class__.__name__
        message = e.message
        details = e.details
    elif isinstance(e, OSError):
        # Output files could not be written
        error_type = "PersistenceError"
        message = str(e)
        details = {"path": getattr(e, "filename", None)}
    else:
        error_type = "UnknownError"
        message = str(e)
        details = {
            "traceback": traceback.format_exc().splitlines()
        }

    payload = {
        "ok": False,
        "error": {
            "type": error_type,
            "message": message,
            "details": details
        },
        "meta": {
            "version": 1
        }
    }
    
    return json.dumps(payload, indent=2)
