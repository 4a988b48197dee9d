"""
Tests for the note endpoints.
"""

import pytest

from tests.test_contacts import create


@pytest.fixture
def contact(client, auth_headers):
    return create(client, auth_headers, fullName="Jane Doe")


def add_note(client, headers, contact_id, content):
    return client.post("/api/notes", json={"contactId": contact_id, "content": content}, headers=headers)


def test_create_and_list_newest_first(client, auth_headers, contact):
    first = add_note(client, auth_headers, contact["id"], "Met at conference")
    assert first.status_code == 201
    assert first.json()["contactId"] == contact["id"]
    add_note(client, auth_headers, contact["id"], "Sent follow-up")

    response = client.get(f"/api/notes/contact/{contact['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert [n["content"] for n in response.json()] == ["Sent follow-up", "Met at conference"]


@pytest.mark.parametrize("payload", [{"content": "no contact"}, {"contactId": 1}, {"contactId": 1, "content": ""}])
def test_create_requires_contact_and_content(client, auth_headers, contact, payload):
    response = client.post("/api/notes", json=payload, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Contact ID and content are required"


def test_note_on_foreign_contact_is_not_found_and_not_written(client, auth_headers, other_headers):
    foreign = create(client, other_headers, fullName="Theirs")
    response = add_note(client, auth_headers, foreign["id"], "sneaky")
    assert response.status_code == 404
    assert response.json()["detail"] == "Contact not found"

    assert client.get(f"/api/notes/contact/{foreign['id']}", headers=other_headers).json() == []


def test_list_for_foreign_contact_is_not_found(client, auth_headers, other_headers):
    foreign = create(client, other_headers, fullName="Theirs")
    add_note(client, other_headers, foreign["id"], "private")
    response = client.get(f"/api/notes/contact/{foreign['id']}", headers=auth_headers)
    assert response.status_code == 404


def test_update(client, auth_headers, contact):
    note = add_note(client, auth_headers, contact["id"], "draft").json()
    response = client.put(f"/api/notes/{note['id']}", json={"content": "final"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["content"] == "final"

    response = client.put(f"/api/notes/{note['id']}", json={"content": ""}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Content is required"


def test_update_and_delete_foreign_note_not_found(client, auth_headers, other_headers):
    foreign = create(client, other_headers, fullName="Theirs")
    note = add_note(client, other_headers, foreign["id"], "private").json()

    assert client.put(f"/api/notes/{note['id']}", json={"content": "x"}, headers=auth_headers).status_code == 404
    assert client.delete(f"/api/notes/{note['id']}", headers=auth_headers).status_code == 404
    assert client.get(f"/api/notes/contact/{foreign['id']}", headers=other_headers).json()[0]["content"] == "private"


def test_delete(client, auth_headers, contact):
    note = add_note(client, auth_headers, contact["id"], "bye").json()
    response = client.delete(f"/api/notes/{note['id']}", headers=auth_headers)
    assert response.json() == {"message": "Note deleted successfully"}
    assert client.get(f"/api/notes/contact/{contact['id']}", headers=auth_headers).json() == []
    assert client.delete(f"/api/notes/{note['id']}", headers=auth_headers).status_code == 404
