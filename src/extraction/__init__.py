"""
Extraction services: PDF / voice backend client, voice response mapping and
screenshot OCR.
"""
