"""Tests for publishing a draft to live and restoring a draft from live."""


def _add_page(client, headers, form_id, path, **extra):
    resp = client.post(
        f"/forms/{form_id}/definition/draft/pages",
        json={"title": path.strip("/").capitalize(), "path": path, **extra},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def _publish(client, headers, form_id):
    return client.post(f"/forms/{form_id}/create-live", headers=headers)


class TestCreateLive:
    def test_live_matches_draft(self, client, auth_headers, form_id):
        _add_page(client, auth_headers, form_id, "/name")

        resp = _publish(client, auth_headers, form_id)
        assert resp.status_code == 200
        assert resp.json()["status"] == "created-live"

        draft = client.get(f"/forms/{form_id}/definition/draft").json()
        live = client.get(f"/forms/{form_id}/definition").json()
        assert live == draft

    def test_later_draft_edits_leave_live_alone(self, client, auth_headers, form_id):
        _publish(client, auth_headers, form_id)
        live_before = client.get(f"/forms/{form_id}/definition").json()

        _add_page(client, auth_headers, form_id, "/address")

        assert client.get(f"/forms/{form_id}/definition").json() == live_before
        draft = client.get(f"/forms/{form_id}/definition/draft").json()
        assert [page["path"] for page in draft["pages"]] == ["/address", "/summary"]

    def test_live_stamp(self, client, auth_headers, form_id):
        _publish(client, auth_headers, form_id)
        first = client.get(f"/forms/{form_id}").json()["live"]
        assert first["createdBy"] == {"id": "forms-designer", "displayName": "Forms Designer"}

        _publish(client, auth_headers, form_id)
        second = client.get(f"/forms/{form_id}").json()["live"]
        assert second["createdAt"] == first["createdAt"]
        assert second["updatedAt"] >= first["updatedAt"]

    def test_invalid_draft_is_not_published(self, client, auth_headers, form_id):
        _add_page(
            client,
            auth_headers,
            form_id,
            "/colour",
            components=[{"name": "colour", "title": "Colour", "type": "SelectField", "list": "missing"}],
        )

        resp = _publish(client, auth_headers, form_id)
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Structural Invalid"
        assert "unknown list 'missing'" in body["errors"][0]

        assert client.get(f"/forms/{form_id}").json()["live"] is None
        assert client.get(f"/forms/{form_id}/definition").status_code == 404

    def test_valid_list_reference_publishes(self, client, auth_headers, form_id):
        lst = client.post(
            f"/forms/{form_id}/definition/draft/lists",
            json={"title": "Colours", "name": "colours", "type": "string", "items": [{"text": "Red", "value": "red"}]},
            headers=auth_headers,
        ).json()
        _add_page(
            client,
            auth_headers,
            form_id,
            "/colour",
            components=[{"name": "colour", "title": "Colour", "type": "SelectField", "list": lst["id"]}],
        )
        assert _publish(client, auth_headers, form_id).status_code == 200

    def test_requires_publish_scope(self, client, form_id):
        assert client.post(f"/forms/{form_id}/create-live").status_code == 401


class TestCreateDraft:
    def test_draft_restored_from_live(self, client, auth_headers, form_id):
        _add_page(client, auth_headers, form_id, "/name")
        _publish(client, auth_headers, form_id)
        _add_page(client, auth_headers, form_id, "/scratch")

        resp = client.post(f"/forms/{form_id}/create-draft", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "created-draft"

        draft = client.get(f"/forms/{form_id}/definition/draft").json()
        live = client.get(f"/forms/{form_id}/definition").json()
        assert draft == live
        assert [page["path"] for page in draft["pages"]] == ["/name", "/summary"]

    def test_no_live_definition(self, client, auth_headers, form_id):
        resp = client.post(f"/forms/{form_id}/create-draft", headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid Input"

    def test_unknown_form(self, client, auth_headers):
        resp = client.post("/forms/00000000-0000-0000-0000-000000000000/create-draft", headers=auth_headers)
        assert resp.status_code == 404
