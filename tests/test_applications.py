"""
Tests for applying to opportunities and listing applications.
"""
import pytest
from bson import ObjectId

from app.core.errors import Conflict, NotFound
from app.services.mongo_service import ApplicationService
from tests.conftest import auth_header, create_opportunity, register_and_login


def apply(client, student, opportunity, **fields):
    body = {"opportunity_id": opportunity["id"], "position": "SDE Intern", **fields}
    return client.post("/student/apply", json=body, headers=auth_header(student["token"]))


def test_apply_twice_conflicts(client, student, company):
    opp = create_opportunity(client, company)

    first = apply(client, student, opp, company_id=company["id"])
    second = apply(client, student, opp, company_id=company["id"])

    assert first.status_code == 201
    application = first.json()["application"]
    assert application["status"] == "pending"
    assert application["company"] == company["id"]
    assert application["student"] == student["id"]
    assert second.status_code == 409
    assert second.json() == {"message": "Already applied to this opportunity"}


def test_apply_unknown_opportunity(client, student):
    resp = apply(client, student, {"id": str(ObjectId())})
    assert resp.status_code == 404

    resp = apply(client, student, {"id": "not-an-id"})
    assert resp.status_code == 404


def test_apply_with_wrong_company(client, student, company, other_company):
    opp = create_opportunity(client, company)
    resp = apply(client, student, opp, company_id=other_company["id"])
    assert resp.status_code == 400


def test_apply_requires_student(client, company):
    opp = create_opportunity(client, company)
    resp = apply(client, company, opp)
    assert resp.status_code == 403


def test_resume_url_is_snapshotted(client, student, company, local_storage):
    headers = auth_header(student["token"])
    client.post("/student/profile", json={"resume_url": "https://cdn.example.com/v1.pdf"}, headers=headers)
    opp = create_opportunity(client, company)
    apply(client, student, opp)

    files = {"file": ("v2.pdf", b"%PDF v2", "application/pdf")}
    client.post("/student/profile/upload", files=files, headers=headers)

    apps = client.get("/student/applications", headers=headers).json()["applications"]
    assert apps[0]["resume_url"] == "https://cdn.example.com/v1.pdf"


def test_student_listing_joins_company_and_opportunity(client, student, company):
    opp = create_opportunity(client, company, title="Data Engineer", role="DE", package="10 LPA")
    apply(client, student, opp, additional_info="Available from June")

    resp = client.get("/student/applications", headers=auth_header(student["token"]))

    assert resp.status_code == 200
    app_ = resp.json()["applications"][0]
    assert app_["company_name"] == "Acme"
    assert app_["opportunity"] == {"id": opp["id"], "title": "Data Engineer", "role": "DE", "package": "10 LPA"}
    assert app_["additional_info"] == "Available from June"


def test_company_sees_only_its_applications(client, student, company, other_company):
    acme_opp = create_opportunity(client, company)
    globex_opp = create_opportunity(client, other_company, title="ML Engineer")
    apply(client, student, acme_opp)
    apply(client, student, globex_opp)

    acme = client.get("/company/applications", headers=auth_header(company["token"])).json()
    globex = client.get("/company/applications", headers=auth_header(other_company["token"])).json()

    assert [a["opportunity_id"] for a in acme["applications"]] == [acme_opp["id"]]
    assert [a["opportunity_id"] for a in globex["applications"]] == [globex_opp["id"]]
    profile = acme["applications"][0]["student_profile"]
    assert profile["email"] == "alice@example.com"
    assert "password" not in profile


def test_ledger_service_rules(client, student, company):
    opp = create_opportunity(client, company)
    ledger = ApplicationService()

    ledger.apply(student["id"], opp["id"], None, "SDE")
    with pytest.raises(Conflict):
        ledger.apply(student["id"], opp["id"], None, "SDE")
    with pytest.raises(NotFound):
        ledger.apply(str(ObjectId()), opp["id"], None, "SDE")


def test_unique_index_on_student_and_opportunity(mongo_db):
    indexes = mongo_db.applications.index_information().values()
    assert any(
        ix.get("unique") and [k for k, _ in ix["key"]] == ["student", "opportunity_id"]
        for ix in indexes
    )


def test_other_students_do_not_conflict(client, student, company):
    bob = register_and_login(client, "student", "bob@example.com", "Bob")
    opp = create_opportunity(client, company)

    assert apply(client, student, opp).status_code == 201
    assert apply(client, bob, opp).status_code == 201


def test_concurrent_duplicate_caught_by_unique_index(client, student, company, monkeypatch):
    opp = create_opportunity(client, company)
    ledger = ApplicationService()
    ledger.apply(student["id"], opp["id"], None, "SDE")

    # second request that raced past the existence check
    monkeypatch.setattr(ledger.collection, "find_one", lambda *args, **kwargs: None)

    with pytest.raises(Conflict) as exc:
        ledger.apply(student["id"], opp["id"], None, "SDE")
    assert exc.value.message == "Already applied to this opportunity"
