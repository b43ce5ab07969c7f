# FastAPI application redirect
# Exposes the app from the fieldcollect package for uvicorn:
#   uvicorn main:app --host 0.0.0.0 --port 8000

from fieldcollect.main import app  # noqa: F401
