"""Certificate issuance, bulk import and verification service."""
