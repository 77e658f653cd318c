"""
MailWarden Services

Detection engine, ingestion sources, storage and the processing pipeline.
"""
