"""
PDF Host Backend - REST API for hosting PDF files and their metadata

This package provides a FastAPI-based web service that accepts PDF uploads
together with a caller-defined JSON metadata document. It enables:

- PDF uploads stored on local disk
- Metadata records persisted in MongoDB
- Fetching one or all records, and deleting records
- A local JSON snapshot of uploaded filenames and their metadata

File storage and metadata storage are two independent side effects. A file
written before a failed insert, or behind a deleted record, is left on disk.

Key Components:
    - main: FastAPI application and HTTP endpoint definitions
    - service: Record lifecycle (create, fetch, delete, edit)
    - metadata_store: MongoDB connection handle and collection wrapper
    - blob_store: Local disk storage for uploads
    - snapshot: Auxiliary JSON snapshot cache
    - configuration: Defaults, YAML and environment overrides
    - errors: Error taxonomy mapped to HTTP statuses

Usage:
    Run the API server with:
        uvicorn pdf_host_backend.main:app --reload --host 0.0.0.0 --port 8080

    Or use the installed script:
        pdf-host
"""
