"""Infrastructure layer — process-wide concerns for the studio assistant.

Modules:
    log_setup   stderr logging handler shared by the API server and the client.
    metrics     Prometheus metrics registry for gateways, transcription and the store.
"""
