import pytest

from collections_ui.services import (
    DemoCollectionsService,
    ServiceError,
    get_collections_service,
)


class TestServiceFactory:
    def test_demo_kind(self):
        assert isinstance(get_collections_service("demo"), DemoCollectionsService)

    def test_instance_is_cached(self):
        assert get_collections_service("demo") is get_collections_service("demo")

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown collections service kind"):
            get_collections_service("oracle")


class TestServiceError:
    def test_str_includes_code(self):
        assert str(ServiceError("Row not found", code="PGRST116")) == (
            "Row not found (PGRST116)"
        )
        assert str(ServiceError("boom")) == "boom"
