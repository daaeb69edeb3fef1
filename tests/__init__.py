"""
Test suite for the Dumangas Agricultural Office backend.

Test Organization:
- unit/ - Service, catalog and helper tests (no HTTP)
- integration/ - API tests through the DRF test client
"""
