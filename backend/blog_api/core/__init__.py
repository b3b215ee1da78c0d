# blog_api/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default admin creation
- db: Database configuration and connection management
- errors: Typed API failures rendered by the app's exception handlers
- identity / policy / visibility: Who is calling, what they may write, what they may read
- tokens: Issuing, validating and revoking bearer tokens
- pagination / relations: Page envelopes and batched relation counts
- security: Password hashing and bearer signing
"""
