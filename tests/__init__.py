"""
Test suite for photogallery.

This module contains all test cases for the application:
- Unit tests for models, services and the HTTP layer
- Integration tests for complete gallery workflows
"""
