"""Shared files: mentor uploads, visibility rules, download and owner management."""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest

PDF_BYTES = b"%PDF-1.4 sample notes"


async def _upload(client, mentor, *, public=True, name="notes.pdf", mime="application/pdf", **form):
    data = {"title": form.pop("title", "Physics notes"), "is_public": "true" if public else "false", **form}
    return await client.post(
        "/api/files/upload",
        files={"file": (name, PDF_BYTES, mime)},
        data=data,
        headers=mentor["headers"],
    )


@pytest.mark.asyncio
async def test_upload_and_download(client, portal) -> None:
    mentor = await portal.mentor()
    student = await portal.student()
    r = await _upload(client, mentor, category="study-materials", tags="physics, exam ,")
    assert r.status_code == 201, r.text
    shared = r.json()["file"]
    assert shared["original_name"] == "notes.pdf"
    assert shared["file_size"] == len(PDF_BYTES)
    assert shared["tags"] == ["physics", "exam"]
    assert shared["filename"].endswith(".pdf")
    assert shared["filename"] != "notes.pdf"

    download = await client.get(f"/api/files/download/{shared['id']}", headers=student["headers"])
    assert download.status_code == 200
    assert download.content == PDF_BYTES

    info = (await client.get(f"/api/files/{shared['id']}", headers=student["headers"])).json()
    assert info["download_count"] == 1
    assert info["uploader"]["id"] == mentor["user"]["id"]


@pytest.mark.asyncio
async def test_upload_rejections(client, portal) -> None:
    mentor = await portal.mentor()
    student = await portal.student()
    pending = await portal.mentor(approve=False)

    bad_type = await _upload(client, mentor, name="run.exe", mime="application/x-msdownload")
    assert bad_type.status_code == 400
    assert bad_type.json()["message"] == "Invalid file type"

    bad_category = await _upload(client, mentor, category="secret")
    assert bad_category.status_code == 400

    assert (await _upload(client, student)).status_code == 404
    assert (await _upload(client, pending)).status_code == 403


@pytest.mark.asyncio
async def test_visibility_by_role(client, portal) -> None:
    admin = await portal.admin()
    owner = await portal.mentor(admin=admin)
    other_mentor = await portal.mentor(admin=admin)
    student = await portal.student()
    public = (await _upload(client, owner, title="Public guide")).json()["file"]
    private = (await _upload(client, owner, public=False, title="Draft answers")).json()["file"]

    def ids(body):
        return {f["id"] for f in body["files"]}

    as_student = (await client.get("/api/files", headers=student["headers"])).json()
    assert ids(as_student) == {public["id"]}
    as_other = (await client.get("/api/files", headers=other_mentor["headers"])).json()
    assert ids(as_other) == {public["id"]}
    as_owner = (await client.get("/api/files", headers=owner["headers"])).json()
    assert ids(as_owner) == {public["id"], private["id"]}
    as_admin = (await client.get("/api/files", headers=admin["headers"])).json()
    assert as_admin["pagination"]["total_files"] == 2

    assert (await client.get(f"/api/files/{private['id']}", headers=student["headers"])).status_code == 403
    assert (
        await client.get(f"/api/files/download/{private['id']}", headers=other_mentor["headers"])
    ).status_code == 403


@pytest.mark.asyncio
async def test_search_never_widens_visibility(client, portal) -> None:
    owner = await portal.mentor()
    student = await portal.student()
    await _upload(client, owner, public=False, title="Secret physics key")
    visible = (await _upload(client, owner, title="Physics formulas")).json()["file"]

    found = (await client.get("/api/files?search=physics", headers=student["headers"])).json()
    assert [f["id"] for f in found["files"]] == [visible["id"]]
    assert found["pagination"]["total_files"] == 1


@pytest.mark.asyncio
async def test_categories_and_filter(client, portal) -> None:
    mentor = await portal.mentor()
    await _upload(client, mentor, category="guides")
    await _upload(client, mentor, category="templates")
    categories = (await client.get("/api/files/categories", headers=mentor["headers"])).json()
    assert categories == ["guides", "templates"]

    guides = (await client.get("/api/files?category=guides", headers=mentor["headers"])).json()
    assert guides["pagination"]["total_files"] == 1
    assert guides["files"][0]["category"] == "guides"


@pytest.mark.asyncio
async def test_owner_update_and_delete(client, portal) -> None:
    owner = await portal.mentor()
    other = await portal.mentor()
    shared = (await _upload(client, owner, public=False)).json()["file"]

    r = await client.put(
        f"/api/files/{shared['id']}",
        json={"title": "Updated", "is_public": True, "tags": ["revision"]},
        headers=owner["headers"],
    )
    assert r.status_code == 200
    updated = r.json()["file"]
    assert updated["title"] == "Updated"
    assert updated["is_public"] is True
    assert updated["tags"] == ["revision"]

    assert (
        await client.put(f"/api/files/{shared['id']}", json={"title": "Mine"}, headers=other["headers"])
    ).status_code == 403
    assert (await client.delete(f"/api/files/{shared['id']}", headers=other["headers"])).status_code == 403

    r = await client.delete(f"/api/files/{shared['id']}", headers=owner["headers"])
    assert r.status_code == 200
    assert (await client.get(f"/api/files/{shared['id']}", headers=owner["headers"])).status_code == 404
