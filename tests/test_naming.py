"""
tests/test_naming.py
Unit tests for nestgen.naming: case conversion and the NamingPolicy.
"""

from __future__ import annotations

import pytest

from nestgen.errors import ConfigurationError
from nestgen.models import (
    FILE_CASE_STYLES,
    ArtifactType,
    CaseStyle,
    ExportType,
    GenerationOptions,
    PropertyVisibility,
    RelationType,
    StrictMode,
)
from nestgen.naming import (
    NamingPolicy,
    convert_case,
    module_identifier,
    split_words,
    to_camel_case,
    to_pascal_case,
)


# ===========================================================================
# Case conversion
# ===========================================================================


class TestCaseConversion:
    """Low-level converters."""

    @pytest.mark.parametrize(
        "raw, style, expected",
        [
            ("user_profile", CaseStyle.CAMEL, "userProfile"),
            ("user_profile", CaseStyle.PASCAL, "UserProfile"),
            ("UserProfile", CaseStyle.PARAM, "user-profile"),
            ("userProfile", CaseStyle.SNAKE, "user_profile"),
            ("user-profile", "pascal", "UserProfile"),
            ("HTTPResponse", CaseStyle.PASCAL, "HttpResponse"),
        ],
    )
    def test_convert(self, raw: str, style, expected: str) -> None:
        assert convert_case(raw, style) == expected

    @pytest.mark.parametrize("raw", ["user_profile", "UserProfile", "user-Profile x"])
    def test_none_is_identity(self, raw: str) -> None:
        assert convert_case(raw, CaseStyle.NONE) == raw

    def test_split_words_on_acronyms(self) -> None:
        assert split_words("XMLHttpRequest") == ("XML", "Http", "Request")

    def test_digit_word_keeps_boundary(self) -> None:
        assert to_pascal_case("order_2nd") == "Order_2nd"
        assert to_camel_case("order_2nd") == "order_2nd"

    def test_unknown_style_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="kebab-shout"):
            convert_case("user", "kebab-shout")

    def test_style_outside_call_site_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            convert_case("user", CaseStyle.SNAKE, FILE_CASE_STYLES)

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            convert_case("user", "nope")

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("./out/shop", "shop"),
            ("out/shop/", "shop"),
            ("/srv/app/blog", "blog"),
            ("out/shop/..", "out"),
            ("out/shop/.", "shop"),
        ],
    )
    def test_module_identifier(self, path: str, expected: str) -> None:
        assert module_identifier(path) == expected

    def test_module_identifier_of_filesystem_root_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="module"):
            module_identifier("/")

    def test_parent_segment_names_the_module_class(self) -> None:
        assert NamingPolicy().module_name(module_identifier("out/shop/..")) == "OutModule"


# ===========================================================================
# NamingPolicy
# ===========================================================================


class TestNamingPolicy:
    """Derived names and declaration helpers."""

    def test_default_symbol_names(self) -> None:
        policy = NamingPolicy()
        assert policy.model_name("user_profile") == "UserProfileModel"
        assert policy.dto_name("user_profile") == "UserProfileDto"
        assert policy.service_name("user_profile") == "UserProfileService"
        assert policy.controller_name("user_profile") == "UserProfileController"
        assert policy.module_name("shop") == "ShopModule"

    def test_camel_entity_names(self) -> None:
        policy = NamingPolicy(entity_case=CaseStyle.CAMEL)
        assert policy.model_name("user_profile") == "userProfileModel"

    def test_file_names_follow_file_case(self) -> None:
        pascal = NamingPolicy(file_case=CaseStyle.PASCAL)
        param = NamingPolicy(file_case=CaseStyle.PARAM)
        camel = NamingPolicy(file_case=CaseStyle.CAMEL)
        assert pascal.model_file_name("user_profile") == "UserProfile.model"
        assert param.controller_file_name("user_profile") == "user-profile.controller"
        assert param.service_file_name("UserProfile") == "user-profile.service"
        assert camel.dto_file_name("user_profile") == "userProfile.dto"

    def test_module_file_name_is_not_recased(self) -> None:
        policy = NamingPolicy(file_case=CaseStyle.PARAM)
        assert policy.module_file_name("MyShop") == "MyShop.module"
        assert policy.file_name(ArtifactType.MODULE, "MyShop") == "MyShop.module"

    @pytest.mark.parametrize(
        "style, expected",
        [(CaseStyle.PASCAL, "Index"), (CaseStyle.CAMEL, "index"), (CaseStyle.NONE, "index")],
    )
    def test_index_file_name(self, style: CaseStyle, expected: str) -> None:
        assert NamingPolicy(file_case=style).index_file_name() == expected

    def test_property_names(self) -> None:
        assert NamingPolicy(property_case=CaseStyle.SNAKE).property_name("createdAt") == "created_at"
        assert NamingPolicy().property_name("created_at") == "createdAt"

    def test_relation_type_expressions(self) -> None:
        eager = NamingPolicy()
        lazy = NamingPolicy(lazy=True)
        assert eager.relation_type_expr("PostModel", RelationType.ONE_TO_MANY) == "PostModel[]"
        assert eager.relation_type_expr("TagModel", "ManyToMany") == "TagModel[]"
        assert eager.relation_type_expr("UserModel", RelationType.MANY_TO_ONE) == "UserModel"
        assert lazy.relation_type_expr("PostModel", RelationType.ONE_TO_MANY) == "Promise<PostModel[]>"
        assert lazy.relation_type_expr("UserModel", RelationType.ONE_TO_ONE) == "Promise<UserModel>"

    def test_visibility(self) -> None:
        assert NamingPolicy().visibility() == ""
        assert NamingPolicy(property_visibility=PropertyVisibility.PUBLIC).visibility() == "public "

    def test_export_helpers(self) -> None:
        named = NamingPolicy(export_type=ExportType.NAMED)
        default = NamingPolicy(export_type=ExportType.DEFAULT)
        assert named.local_import("UserModel") == "{UserModel}"
        assert named.default_export() == ""
        assert default.local_import("UserModel") == "UserModel"
        assert default.default_export() == "default"

    def test_strict_mode(self) -> None:
        assert NamingPolicy().strict_mode() == ""
        assert NamingPolicy(strict=StrictMode.DEFINITE).strict_mode() == "!"
        assert NamingPolicy(strict="?").strict_mode() == "?"

    def test_json_literal(self) -> None:
        assert NamingPolicy.json_literal({"nullable": True, "name": "x"}) == 'nullable:true,name:"x"'
        assert NamingPolicy.json_literal({}) == ""

    def test_template_helpers_are_bound(self) -> None:
        helpers = NamingPolicy(entity_case=CaseStyle.CAMEL).template_helpers()
        assert helpers["model_name"]("user") == "userModel"
        assert helpers["json"]({"length": 5}) == "length:5"

    def test_from_options(self) -> None:
        options = GenerationOptions.from_mapping(
            {"convertCaseEntity": "camel", "convertCaseFile": "param", "lazy": True}
        )
        policy = NamingPolicy.from_options(options)
        assert policy.entity_case is CaseStyle.CAMEL
        assert policy.file_case is CaseStyle.PARAM
        assert policy.lazy is True


# ===========================================================================
# Fail-fast validation
# ===========================================================================


class TestPolicyValidation:
    """Invalid styles never produce a policy."""

    def test_unknown_entity_style(self) -> None:
        with pytest.raises(ConfigurationError):
            NamingPolicy(entity_case="kebab-shout")

    def test_snake_not_allowed_for_entities(self) -> None:
        with pytest.raises(ConfigurationError):
            NamingPolicy(entity_case="snake")

    def test_param_not_allowed_for_properties(self) -> None:
        with pytest.raises(ConfigurationError):
            NamingPolicy(property_case="param")

    def test_unvalidated_options_rejected(self) -> None:
        options = GenerationOptions.model_construct(convert_case_entity="kebab-shout")
        with pytest.raises(ConfigurationError):
            NamingPolicy.from_options(options)

    def test_options_reject_bad_style(self) -> None:
        with pytest.raises(ConfigurationError):
            GenerationOptions.from_mapping({"convertCaseFile": "snake"})
