# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Rental Platform API:
# - test_sms_templates.py / test_phone_and_gate.py: lib unit tests
# - test_bulk_dispatch.py: Bulk SMS loop (ordering, failures, pacing)
# - test_business_store.py: Business store contract, both backends
# - test_models.py: Pydantic model validation
# - test_*_api.py: Endpoint tests through FastAPI's TestClient
# - test_workers.py: Celery task and task status endpoint
#
# Run tests with: pytest
# =============================================================================
