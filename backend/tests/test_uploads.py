from pathlib import Path

from jobboard import config

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_upload_company_pictures(client, recruiter):
    _, headers = recruiter
    files = [("pictures", ("beach.png", PNG, "image/png")), ("pictures", ("spot.jpg", PNG, "image/jpeg"))]
    r = client.post("/api/company/upload", headers=headers, files=files)
    assert r.status_code == 200, r.text
    paths = r.json()["paths"]
    assert len(paths) == 2
    assert all(p.startswith("/uploads/company-pictures/") for p in paths)
    assert paths[0].endswith(".png")

    stored = Path(config.UPLOAD_DIR) / paths[0][len("/uploads/"):]
    assert stored.read_bytes() == PNG
    assert client.get(paths[0]).status_code == 200


def test_upload_rejects_non_images_and_too_many_files(client, recruiter):
    _, headers = recruiter
    r = client.post("/api/jobs/upload", headers=headers, files=[("pictures", ("cv.pdf", b"%PDF", "application/pdf"))])
    assert r.status_code == 400
    assert "Invalid file type" in r.json()["detail"]

    four = [("pictures", (f"{i}.png", PNG, "image/png")) for i in range(4)]
    r = client.post("/api/jobs/upload", headers=headers, files=four)
    assert r.status_code == 400


def test_upload_rejects_large_files(client, make_user):
    _, headers = make_user("job-seeker")
    big = b"\x00" * (5 * 1024 * 1024 + 1)
    r = client.post("/api/cv/upload", headers=headers, files=[("pictures", ("big.png", big, "image/png"))])
    assert r.status_code == 400
    assert "too large" in r.json()["detail"]


def test_upload_logo_returns_url(client, recruiter):
    _, headers = recruiter
    r = client.post("/api/company/upload-logo", headers=headers, files={"logo": ("logo.webp", PNG, "image/webp")})
    assert r.status_code == 200
    assert r.json()["url"].startswith("/uploads/company-logos/")


def test_upload_requires_matching_role(client, make_user):
    _, headers = make_user("job-seeker")
    r = client.post("/api/jobs/upload", headers=headers, files=[("pictures", ("a.png", PNG, "image/png"))])
    assert r.status_code == 403
