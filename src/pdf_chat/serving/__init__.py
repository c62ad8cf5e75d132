"""
Serving — FastAPI application for PDF upload and question answering.

Routes are thin: they validate input, hand the work to the ingestion or
query pipeline on the threadpool, and map package errors to HTTP status
codes.
"""
