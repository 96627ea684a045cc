"""End-to-end: one configuration module drives both the document and the handlers."""

import asyncio
import json
from pathlib import Path

from simple_msf import MsfError, compile_document, handler, json_response
from simple_msf.config import load_config, require_definition

FIXTURES = Path(__file__).parent / "fixtures"


def _load():
    definition, _ = require_definition(load_config(FIXTURES / "users_config.py"))
    return definition


class TestSharedDeclaration:
    def test_document_and_handler_share_schemas(self):
        definition = _load()
        doc = compile_document(definition)
        endpoint = definition.paths["/users"]["post"]
        body_schema = definition.schemas[endpoint.body]

        assert doc["components"]["schemas"][endpoint.body] == body_schema.model_json_schema()

        users = {}

        @handler(body_schema=body_schema, allowed_methods=["POST"], logging_enabled=False)
        async def create_user(request, event, context):
            if request.body.name in users:
                raise MsfError(409, "User exists.")
            users[request.body.name] = len(users) + 1
            return json_response({"id": users[request.body.name], "name": request.body.name}, status_code=201)

        created = asyncio.run(create_user({"httpMethod": "POST", "body": '{"name": "Ann"}'}, None))
        assert created["statusCode"] == 201
        assert json.loads(created["body"]) == {"id": 1, "name": "Ann"}

        duplicate = asyncio.run(create_user({"httpMethod": "POST", "body": '{"name": "Ann"}'}, None))
        assert duplicate["statusCode"] == 409
        assert json.loads(duplicate["body"]) == {"message": "User exists."}

        invalid = asyncio.run(create_user({"httpMethod": "POST", "body": "{}"}, None))
        assert invalid["statusCode"] == 400
        errors = json.loads(invalid["body"])["errors"]
        assert [e["loc"] for e in errors] == [["name"]]

        wrong_method = asyncio.run(create_user({"httpMethod": "PUT", "body": "{}"}, None))
        assert wrong_method["statusCode"] == 405
        assert wrong_method["headers"]["Allow"] == "POST"
