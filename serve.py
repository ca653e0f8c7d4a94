#!/usr/bin/env python3
"""Launch the pharmacy locator API server."""
import os
import uvicorn

if __name__ == "__main__":
    is_production = os.environ.get("ENV") == "production"
    uvicorn.run(
        "pharmacy_locator.api.app:app",
        host="0.0.0.0" if is_production else "127.0.0.1",
        port=int(os.environ.get("PORT", 3004 if is_production else 8000)),
        reload=not is_production,
    )
