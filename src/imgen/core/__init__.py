"""
Core modules for imgen.

This package contains the core logic for:
- Configuration management
- Prompt, image and output argument handling
- multipart/form-data encoding
- OpenAI Images API requests and responses
- Saving generated images
"""
