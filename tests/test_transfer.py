"""
Tests for contact export and best-effort import.
"""

from tests.conftest import register
from tests.test_contacts import create

EXPORT_FIELDS = ["fullName", "jobTitle", "firm", "role", "email", "phone", "linkedIn", "reachedOut", "responded"]


def import_records(client, headers, records):
    response = client.post("/api/import", json={"contacts": records}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_export_shape(client, auth_headers):
    referrer = create(client, auth_headers, fullName="Referrer", firm="Acme", reachedOut=True)
    contact = create(
        client, auth_headers, fullName="Jane", jobTitle="VP", referredById=referrer["id"], responded=True
    )
    for content in ("first", "second"):
        client.post("/api/notes", json={"contactId": contact["id"], "content": content}, headers=auth_headers)

    rows = client.get("/api/export", headers=auth_headers).json()
    assert [r["fullName"] for r in rows] == ["Referrer", "Jane"]
    assert rows[0]["reachedOut"] == "Yes"
    assert rows[0]["responded"] == "No"
    assert rows[0]["email"] == ""
    assert rows[0]["referredBy"] == ""
    assert rows[1]["referredBy"] == "Referrer"
    assert rows[1]["notes"] == "second | first"
    assert rows[1]["jobTitle"] == "VP"
    assert rows[1]["createdAt"] and rows[1]["updatedAt"]


def test_import_reports_per_record_failures(client, auth_headers):
    create(client, auth_headers, fullName="Existing", firm="Acme")
    body = import_records(
        client,
        auth_headers,
        [
            {"fullName": "", "firm": "Nowhere"},
            {"fullName": "Existing", "firm": "Acme"},
            {"fullName": "Fresh", "firm": "Acme", "reachedOut": "Yes", "responded": True},
            {"fullName": "Existing", "firm": "Globex"},
        ],
    )
    assert body["results"]["success"] == 2
    assert body["results"]["failed"] == 2
    assert body["results"]["errors"] == ["Missing full name for contact", "Duplicate contact: Existing"]
    assert body["message"] == "Import completed: 2 succeeded, 2 failed"

    fresh = client.get("/api/contacts", params={"search": "Fresh"}, headers=auth_headers).json()[0]
    assert fresh["reachedOut"] is True
    assert fresh["responded"] is True


def test_import_duplicate_detection_is_case_sensitive_and_in_batch(client, auth_headers):
    body = import_records(
        client,
        auth_headers,
        [
            {"fullName": "Jane", "firm": ""},
            {"fullName": "Jane"},
            {"fullName": "jane"},
        ],
    )
    assert body["results"]["success"] == 2
    assert body["results"]["errors"] == ["Duplicate contact: Jane"]


def test_import_flags_only_accept_true_or_yes(client, auth_headers):
    import_records(
        client,
        auth_headers,
        [
            {"fullName": "A", "reachedOut": "No", "responded": "yes"},
            {"fullName": "B", "reachedOut": "true"},
        ],
    )
    rows = client.get("/api/contacts", headers=auth_headers).json()
    assert all(r["reachedOut"] is False and r["responded"] is False for r in rows)


def test_import_requires_contacts_list(client, auth_headers):
    response = client.post("/api/import", json={"contacts": "nope"}, headers=auth_headers)
    assert response.status_code == 422


def test_export_then_import_round_trip(client, auth_headers):
    referrer = create(client, auth_headers, fullName="Referrer", firm="Acme", role="Partner")
    create(
        client,
        auth_headers,
        fullName="Jane",
        jobTitle="VP",
        firm="Globex",
        role="Sales",
        email="jane@globex.com",
        phone="555-0100",
        linkedIn="https://linkedin.com/in/jane",
        reachedOut=True,
        responded=True,
        referredById=referrer["id"],
    )
    create(client, auth_headers, fullName="Bare")
    exported = client.get("/api/export", headers=auth_headers).json()

    other_token = register(client, email="copy@example.com", name="Copy")["token"]
    other_headers = {"Authorization": f"Bearer {other_token}"}
    body = import_records(client, other_headers, exported)
    assert body["results"] == {"success": 3, "failed": 0, "errors": []}

    reexported = client.get("/api/export", headers=other_headers).json()
    for original, copy in zip(exported, reexported):
        assert {k: copy[k] for k in EXPORT_FIELDS} == {k: original[k] for k in EXPORT_FIELDS}
        assert copy["referredBy"] == original["referredBy"]


def test_malformed_record_does_not_abort_batch(client, auth_headers):
    body = import_records(
        client,
        auth_headers,
        [
            {"fullName": "Good"},
            {"fullName": "Typed", "phone": 5550100},
            {"fullName": "Broken", "firm": {"name": "Acme"}},
            "not a record",
        ],
    )
    assert body["results"]["success"] == 2
    assert body["results"]["failed"] == 2
    assert body["results"]["errors"][0].startswith("Error importing Broken: invalid firm")
    assert body["results"]["errors"][1].startswith("Error importing record:")

    typed = client.get("/api/contacts", params={"search": "Typed"}, headers=auth_headers).json()[0]
    assert typed["phone"] == "5550100"
