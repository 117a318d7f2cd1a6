"""
Unit tests for type catalogs.
"""

import pytest

from modelguard.catalog import PackageTypeCatalog, StaticTypeCatalog
from modelguard.descriptors import describe
from modelguard.exceptions import DiscoveryError
from modelguard.models import PropertyDescriptor
from sample_models.good.accounts import Account, Money
from sample_models.good.enums import Status


class TestPackageTypeCatalog:
    """Test scanning of importable packages."""

    def test_lists_classes_of_every_submodule(self):
        identities = [
            d.identity for d in PackageTypeCatalog().list_types("sample_models.good")
        ]

        assert identities == sorted(identities)
        assert "sample_models.good.accounts.Account" in identities
        assert "sample_models.good.addresses.Address" in identities
        assert "sample_models.good.customers.Customer" in identities
        assert "sample_models.good.enums.Status" in identities
        assert "sample_models.good.shapes.Shape" in identities
        assert "sample_models.good.widgets.WidgetBuilder" in identities

    def test_imported_classes_are_not_listed(self):
        identities = [
            d.identity for d in PackageTypeCatalog().list_types("sample_models.good")
        ]

        # customers imports Status and BaseModel; each is listed once, at home
        assert identities.count("sample_models.good.enums.Status") == 1
        assert not any("pydantic" in identity for identity in identities)
        assert not any(identity.startswith("decimal.") for identity in identities)

    def test_nested_classes(self):
        identities = {
            d.identity for d in PackageTypeCatalog().list_types("sample_models.nested")
        }

        assert identities == {
            "sample_models.nested.containers.Catalog",
            "sample_models.nested.containers.Catalog.Entry",
            "sample_models.nested.containers.Catalog.Kind",
        }

    def test_nested_classes_can_be_skipped(self):
        identities = {
            d.identity
            for d in PackageTypeCatalog(include_nested=False).list_types(
                "sample_models.nested"
            )
        }

        assert identities == {"sample_models.nested.containers.Catalog"}

    def test_single_module_namespace(self):
        identities = {
            d.identity
            for d in PackageTypeCatalog().list_types("sample_models.good.accounts")
        }

        assert identities == {
            "sample_models.good.accounts.Account",
            "sample_models.good.accounts.Money",
        }

    def test_missing_namespace(self):
        with pytest.raises(DiscoveryError, match="Cannot import namespace") as exc_info:
            PackageTypeCatalog().list_types("sample_models.does_not_exist")

        assert exc_info.value.context["namespace"] == "sample_models.does_not_exist"

    def test_unimportable_module(self):
        with pytest.raises(DiscoveryError) as exc_info:
            PackageTypeCatalog().list_types("sample_models.unimportable")

        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_blank_namespace(self):
        with pytest.raises(DiscoveryError, match="non-empty"):
            PackageTypeCatalog().list_types("  ")


class TestStaticTypeCatalog:
    """Test the explicit registration catalog."""

    def test_lists_registered_types_under_namespace(self):
        catalog = StaticTypeCatalog([Money, Account, Status])

        identities = [d.identity for d in catalog.list_types("sample_models.good")]

        assert identities == [
            "sample_models.good.accounts.Account",
            "sample_models.good.accounts.Money",
            "sample_models.good.enums.Status",
        ]

    def test_namespace_prefix_must_match_whole_segment(self):
        catalog = StaticTypeCatalog([Account])

        with pytest.raises(DiscoveryError, match="No types registered"):
            catalog.list_types("sample_models.go")

    def test_register_with_explicit_properties(self):
        catalog = StaticTypeCatalog()
        props = [PropertyDescriptor(name="id", getter=lambda a: a.id)]

        descriptor = catalog.register(Account, properties=props)

        assert [p.name for p in descriptor.properties] == ["id"]
        assert catalog.list_types("sample_models")[0] is descriptor

    def test_register_descriptor(self):
        catalog = StaticTypeCatalog()
        descriptor = describe(Money)

        assert catalog.register(descriptor) is descriptor
