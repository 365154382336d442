import pytest

from forms_api.services.definition import create_component, delete_component, update_component
from forms_api.services.exceptions import ConflictError, InvalidInputError, NotFoundError


def _definition():
    return {
        "pages": [
            {"id": "p1", "path": "/p1", "components": [{"id": "c1", "name": "first", "type": "TextField"}]},
            {"id": "p2", "path": "/p2", "components": [{"id": "c2", "name": "other", "type": "TextField"}]},
        ]
    }


def _component(**overrides):
    base = {"name": "fullName", "title": "Full name", "type": "TextField", "options": {}, "schema": {}}
    base.update(overrides)
    return base


class TestComponentEdits:
    def test_append(self):
        definition = _definition()
        created = create_component(definition, "p1", _component())
        assert created["id"]
        assert [c["name"] for c in definition["pages"][0]["components"]] == ["first", "fullName"]

    def test_prepend(self):
        definition = _definition()
        create_component(definition, "p1", _component(), prepend=True)
        assert [c["name"] for c in definition["pages"][0]["components"]] == ["fullName", "first"]

    def test_name_unique_within_page_only(self):
        definition = _definition()
        with pytest.raises(ConflictError):
            create_component(definition, "p1", _component(name="first"))
        create_component(definition, "p2", _component(name="first"))

    def test_unknown_page(self):
        with pytest.raises(NotFoundError):
            create_component(_definition(), "nope", _component())

    def test_update_replaces_and_keeps_id(self):
        definition = _definition()
        updated = update_component(definition, "p1", "c1", _component(name="renamed", hint="Hint"))
        assert updated["id"] == "c1"
        assert definition["pages"][0]["components"] == [updated]
        assert updated["hint"] == "Hint"

    def test_update_keeping_own_name(self):
        definition = _definition()
        update_component(definition, "p1", "c1", _component(name="first", title="New title"))
        assert definition["pages"][0]["components"][0]["title"] == "New title"

    def test_update_id_mismatch(self):
        with pytest.raises(InvalidInputError):
            update_component(_definition(), "p1", "c1", _component(id="c9"))

    def test_update_name_collision(self):
        definition = _definition()
        create_component(definition, "p1", _component(name="second"))
        with pytest.raises(ConflictError):
            update_component(definition, "p1", "c1", _component(name="second"))

    def test_update_unknown_component(self):
        with pytest.raises(NotFoundError):
            update_component(_definition(), "p1", "c2", _component())

    def test_delete_leaves_list_references(self):
        definition = _definition()
        definition["pages"][1]["components"][0]["list"] = "l1"
        delete_component(definition, "p1", "c1")
        assert definition["pages"][0]["components"] == []
        assert definition["pages"][1]["components"][0]["list"] == "l1"

    def test_delete_unknown_component(self):
        with pytest.raises(NotFoundError):
            delete_component(_definition(), "p1", "c2")


class TestComponentApi:
    def _page_id(self, client, headers, form_id):
        resp = client.post(
            f"/forms/{form_id}/definition/draft/pages",
            json={"title": "Details", "path": "/details"},
            headers=headers,
        )
        return resp.json()["id"]

    def _url(self, form_id, page_id, component_id=""):
        url = f"/forms/{form_id}/definition/draft/pages/{page_id}/components"
        return f"{url}/{component_id}" if component_id else url

    def test_create_update_delete(self, client, auth_headers, form_id):
        page_id = self._page_id(client, auth_headers, form_id)

        resp = client.post(self._url(form_id, page_id), json=_component(hint=""), headers=auth_headers)
        assert resp.status_code == 200
        component_id = resp.json()["id"]

        resp = client.put(
            self._url(form_id, page_id, component_id),
            json=_component(title="Your full name", id=component_id),
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["title"] == "Your full name"

        resp = client.delete(self._url(form_id, page_id, component_id), headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"id": component_id, "status": "deleted"}

        draft = client.get(f"/forms/{form_id}/definition/draft").json()
        assert draft["pages"][0]["components"] == []

    def test_prepend_query(self, client, auth_headers, form_id):
        page_id = self._page_id(client, auth_headers, form_id)
        client.post(self._url(form_id, page_id), json=_component(name="second"), headers=auth_headers)
        client.post(
            self._url(form_id, page_id),
            params={"prepend": "true"},
            json=_component(name="first"),
            headers=auth_headers,
        )
        draft = client.get(f"/forms/{form_id}/definition/draft").json()
        assert [c["name"] for c in draft["pages"][0]["components"]] == ["first", "second"]

    def test_unknown_component_type(self, client, auth_headers, form_id):
        page_id = self._page_id(client, auth_headers, form_id)
        resp = client.post(self._url(form_id, page_id), json=_component(type="Hologram"), headers=auth_headers)
        assert resp.status_code == 400

    def test_invalid_name(self, client, auth_headers, form_id):
        page_id = self._page_id(client, auth_headers, form_id)
        resp = client.post(self._url(form_id, page_id), json=_component(name="has spaces"), headers=auth_headers)
        assert resp.status_code == 400

    def test_duplicate_name(self, client, auth_headers, form_id):
        page_id = self._page_id(client, auth_headers, form_id)
        client.post(self._url(form_id, page_id), json=_component(), headers=auth_headers)
        resp = client.post(self._url(form_id, page_id), json=_component(), headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Conflict"

    def test_unknown_page(self, client, auth_headers, form_id):
        resp = client.post(self._url(form_id, "missing"), json=_component(), headers=auth_headers)
        assert resp.status_code == 404
