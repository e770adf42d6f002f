"""
Unit tests for the OpenAPI document loader.
"""

import json

import pytest

from sync_trigger.core.exceptions import ApiSpecError
from sync_trigger.openapi import ApiSpec


class TestApiSpec:
    """Tests for ApiSpec."""

    def test_servers(self, api_spec):
        assert api_spec.servers() == ["https://api.example.com/v1"]

    def test_find_list_operation(self, api_spec):
        operation = api_spec.find_operation("listItems")

        assert operation.path == "/items"
        assert operation.method == "get"
        assert operation.parameter_names == ["limit", "updated_since", "X-Tenant"]
        assert operation.request_content_type is None

    def test_path_level_parameters(self, api_spec):
        operation = api_spec.find_operation("getItem")

        assert operation.path == "/items/{itemId}"
        assert operation.parameters[0].location == "path"
        assert operation.parameters[0].required is True

    def test_request_body_content_type(self, api_spec):
        operation = api_spec.find_operation("createItem")

        assert operation.method == "post"
        assert operation.request_content_type == "application/json"
        assert operation.parameters == []

    def test_referenced_parameters_and_body(self, api_document):
        api_document["components"]["parameters"] = {
            "Tenant": {"name": "X-Tenant", "in": "header", "required": True}
        }
        api_document["components"]["requestBodies"] = {
            "Upload": {"content": {"multipart/form-data": {}}}
        }
        api_document["paths"]["/uploads"] = {
            "post": {
                "operationId": "upload",
                "parameters": [{"$ref": "#/components/parameters/Tenant"}],
                "requestBody": {"$ref": "#/components/requestBodies/Upload"},
            }
        }

        operation = ApiSpec(api_document).find_operation("upload")

        assert operation.parameters[0].name == "X-Tenant"
        assert operation.parameters[0].required is True
        assert operation.request_content_type == "multipart/form-data"

    def test_unresolvable_reference(self, api_document):
        api_document["paths"]["/items"]["get"]["parameters"] = [{"$ref": "#/components/parameters/Nope"}]

        with pytest.raises(ApiSpecError, match="Unresolvable"):
            ApiSpec(api_document).find_operation("listItems")

    def test_unknown_operation(self, api_spec):
        with pytest.raises(ApiSpecError, match="Operation not found"):
            api_spec.find_operation("deleteEverything")

    def test_missing_paths(self):
        with pytest.raises(ApiSpecError):
            ApiSpec({"openapi": "3.0.0"})


class TestResolveServer:
    """Tests for server selection."""

    def test_declared_server(self, api_spec):
        assert api_spec.resolve_server(0) == "https://api.example.com/v1"

    def test_other_server_appended(self, api_spec):
        assert api_spec.resolve_server(1, "https://other.example.com") == "https://other.example.com"
        assert api_spec.resolve_server(0, "https://other.example.com") == "https://api.example.com/v1"

    def test_out_of_range_falls_back_to_other_server(self, api_spec):
        assert api_spec.resolve_server(7, "https://other.example.com") == "https://other.example.com"
        assert api_spec.resolve_server(7) is None

    def test_no_servers(self):
        spec = ApiSpec({"paths": {}})
        assert spec.resolve_server(0, "https://only.example.com") == "https://only.example.com"


class TestFromFile:
    """Tests for loading documents from disk."""

    def test_json_file(self, tmp_path, api_document):
        path = tmp_path / "spec.json"
        path.write_text(json.dumps(api_document), encoding="utf-8")

        spec = ApiSpec.from_file(path)

        assert spec.find_operation("listItems").path == "/items"
        assert spec.source == str(path)

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "spec.yaml"
        path.write_text(
            "openapi: 3.0.0\n"
            "paths:\n"
            "  /things:\n"
            "    get:\n"
            "      operationId: listThings\n",
            encoding="utf-8",
        )

        assert ApiSpec.from_file(path).find_operation("listThings").method == "get"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ApiSpecError, match="not found"):
            ApiSpec.from_file(tmp_path / "nope.json")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("paths: {unclosed\n", encoding="utf-8")

        with pytest.raises(ApiSpecError):
            ApiSpec.from_file(path)
