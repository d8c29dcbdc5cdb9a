"""Tests for property normalization."""

import re

import pytest

from criteria import (
    boolean_property,
    list_property,
    mapping_list_property,
    non_empty_string,
    optional_string,
    regex_property,
    require_identity,
    require_property,
    tags_property,
    to_boolean,
)
from models import ValidationError


class TestToBoolean:
    @pytest.mark.parametrize("value", ["true", "TRUE", "True"])
    def test_true_strings(self, value):
        assert to_boolean(value) is True

    @pytest.mark.parametrize("value", ["false", "FALSE", "False"])
    def test_false_strings(self, value):
        assert to_boolean(value) is False

    def test_other_string_unchanged(self):
        assert to_boolean("yes") == "yes"

    def test_non_string_unchanged(self):
        assert to_boolean(True) is True
        assert to_boolean(1) == 1


class TestBooleanProperty:
    def test_default_when_absent(self):
        assert boolean_property({}, "Wait") is False
        assert boolean_property({}, "PrivateZone", default=None) is None

    def test_coerces_string(self):
        assert boolean_property({"Wait": "true"}, "Wait") is True

    def test_rejects_non_boolean(self):
        with pytest.raises(ValidationError, match="The Wait property must be a boolean type"):
            boolean_property({"Wait": "yes"}, "Wait")


class TestRequireProperty:
    def test_missing(self):
        with pytest.raises(ValidationError, match="The StackName property was not specified"):
            require_property({}, "StackName")

    def test_present(self):
        assert require_property({"StackName": "network"}, "StackName") == "network"


class TestStrings:
    def test_non_empty_string_trims(self):
        assert non_empty_string({"Name": "  ami-base  "}, "Name") == "ami-base"

    def test_non_empty_string_rejects_blank(self):
        with pytest.raises(ValidationError, match="The Name property cannot be empty"):
            non_empty_string({"Name": "   "}, "Name")

    def test_optional_string(self):
        assert optional_string({}, "VpcId") is None
        assert optional_string({"VpcId": " vpc-1 "}, "VpcId") == "vpc-1"

    def test_optional_string_rejects_non_string(self):
        with pytest.raises(ValidationError):
            optional_string({"VpcId": 5}, "VpcId")


class TestRegexProperty:
    def test_compiles(self):
        pattern = regex_property({"Regex": "^base-.*"}, "Regex")
        assert isinstance(pattern, re.Pattern)

    def test_absent(self):
        assert regex_property({}, "Regex") is None

    def test_invalid_pattern_embeds_compiler_error(self):
        with pytest.raises(ValidationError, match="invalid regular expression: .*unterminated"):
            regex_property({"Regex": "base-(.*"}, "Regex")


class TestListProperty:
    def test_default(self):
        assert list_property({}, "Owners", ["self"]) == ["self"]

    def test_list(self):
        assert list_property({"Owners": ["amazon"]}, "Owners") == ["amazon"]

    @pytest.mark.parametrize("value", ["amazon", 3, {"a": 1}])
    def test_rejects_non_sequence(self, value):
        with pytest.raises(ValidationError, match="The Owners property must be an array"):
            list_property({"Owners": value}, "Owners")

    def test_mapping_list_rejects_scalars(self):
        with pytest.raises(ValidationError, match="key-value pairs only"):
            mapping_list_property({"Filters": [{"Name": "a"}, "b"]}, "Filters")


class TestTagsProperty:
    def test_absent(self):
        assert tags_property({}) is None

    def test_empty_list_is_no_criterion(self):
        assert tags_property({"Tags": []}) is None

    def test_converts_to_mapping(self):
        tags = [{"Key": "env", "Value": "prod"}, {"Key": "team", "Value": "core"}]
        assert tags_property({"Tags": tags}) == {"env": "prod", "team": "core"}

    def test_requires_key(self):
        with pytest.raises(ValidationError, match="needs a Key"):
            tags_property({"Tags": [{"Value": "prod"}]})


class TestRequireIdentity:
    def test_one_present(self):
        require_identity({"Regex": "^a"}, "Name", "Regex")

    def test_none_present(self):
        with pytest.raises(ValidationError, match="Either Name or Regex property has to be set"):
            require_identity({"Owners": ["self"]}, "Name", "Regex")

    def test_single_name(self):
        with pytest.raises(ValidationError, match="The DomainName property was not specified"):
            require_identity({}, "DomainName")
