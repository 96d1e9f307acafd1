"""
Tests for student profile endpoints and resume upload.
"""
import io

import pytest
from fastapi import UploadFile

from app.core.errors import PayloadTooLarge
from app.utils.file_upload import MAX_FILE_SIZE_BYTES, read_resume_file
from tests.conftest import auth_header


def test_get_profile(client, student):
    resp = client.get("/student/profile", headers=auth_header(student["token"]))

    assert resp.status_code == 200
    profile = resp.json()["student"]
    assert profile["id"] == student["id"]
    assert profile["name"] == "Alice"
    assert profile["skills"] == []
    assert "password" not in profile


def test_partial_update_only_touches_sent_fields(client, student):
    headers = auth_header(student["token"])
    client.post("/student/profile", json={"phone": "99999", "department": "CSE"}, headers=headers)

    resp = client.post("/student/profile", json={"gpa": 8.4, "skills": "python"}, headers=headers)

    assert resp.status_code == 200
    profile = resp.json()["student"]
    assert resp.json()["message"] == "Profile saved"
    assert profile["gpa"] == "8.4"
    assert profile["skills"] == ["python"]
    assert profile["phone"] == "99999"
    assert profile["department"] == "CSE"


def test_update_name_projects_and_certifications(client, student):
    body = {
        "full_name": "  Alice Smith ",
        "projects": [{"id": "p1", "title": "Compiler", "link": "https://example.com/c"}],
        "certifications": [{"name": "AWS SAA", "issuer": "AWS", "date": "2025-05"}],
        "preferred_locations": ["Pune", "Remote"],
    }
    resp = client.post("/student/profile", json=body, headers=auth_header(student["token"]))

    profile = resp.json()["student"]
    assert profile["name"] == "Alice Smith"
    assert profile["projects"][0]["title"] == "Compiler"
    assert profile["certifications"][0]["issuer"] == "AWS"
    assert profile["preferred_locations"] == ["Pune", "Remote"]


def test_blank_name_is_ignored(client, student):
    resp = client.post("/student/profile", json={"full_name": "   "}, headers=auth_header(student["token"]))
    assert resp.json()["student"]["name"] == "Alice"


def test_profile_requires_student_role(client, company):
    resp = client.get("/student/profile", headers=auth_header(company["token"]))
    assert resp.status_code == 403


def test_upload_resume(client, student, local_storage):
    headers = auth_header(student["token"])
    files = {"file": ("alice_cv.pdf", b"%PDF-1.4 resume", "application/pdf")}

    resp = client.post("/student/profile/upload", files=files, headers=headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["file_name"] == "alice_cv.pdf"
    assert data["url"].startswith("http://testserver/uploads/placement-resumes/")
    assert list(local_storage.rglob("*alice_cv.pdf"))

    profile = client.get("/student/profile", headers=headers).json()["student"]
    assert profile["resume_url"] == data["url"]
    assert profile["resume_file_name"] == "alice_cv.pdf"


def test_upload_rejects_unsupported_type(client, student, local_storage):
    files = {"file": ("cv.exe", b"MZ", "application/octet-stream")}
    resp = client.post("/student/profile/upload", files=files, headers=auth_header(student["token"]))
    assert resp.status_code == 400


def test_upload_without_file(client, student, local_storage):
    resp = client.post("/student/profile/upload", headers=auth_header(student["token"]))
    assert resp.status_code == 400
    assert resp.json() == {"message": "No file uploaded"}


def test_verified_students_listing(client, student, tpo):
    assert client.get("/students/verified").json() == {"students": []}

    resp = client.post(f"/tpo/verify-student/{student['id']}", headers=auth_header(tpo["token"]))
    assert resp.status_code == 200
    assert resp.json()["student"]["is_verified"] is True

    verified = client.get("/students/verified").json()["students"]
    assert [s["email"] for s in verified] == ["alice@example.com"]


def test_upload_too_large(client, student, local_storage):
    files = {"file": ("cv.pdf", b"0" * (MAX_FILE_SIZE_BYTES + 1), "application/pdf")}
    resp = client.post("/student/profile/upload", files=files, headers=auth_header(student["token"]))

    assert resp.status_code == 413
    assert resp.json() == {"message": "File too large. Maximum size: 5MB"}
    assert not list(local_storage.rglob("*cv.pdf"))


def test_read_resume_file_size_limit():
    at_limit = UploadFile(file=io.BytesIO(b"0" * MAX_FILE_SIZE_BYTES), filename="cv.pdf")
    content, name = read_resume_file(at_limit)
    assert len(content) == MAX_FILE_SIZE_BYTES
    assert name == "cv.pdf"

    over = UploadFile(file=io.BytesIO(b"0" * (MAX_FILE_SIZE_BYTES + 1)), filename="cv.pdf")
    with pytest.raises(PayloadTooLarge):
        read_resume_file(over)
