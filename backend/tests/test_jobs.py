from jobboard.db import SessionLocal
from jobboard.models import Job


def _set(job_id, **fields):
    db = SessionLocal()
    try:
        db.query(Job).filter(Job.id == job_id).update(fields)
        db.commit()
    finally:
        db.close()


def test_job_requires_company(client, make_user):
    _, headers = make_user("recruiter")
    r = client.post("/api/jobs", headers=headers, json={
        "title": "Instructor", "description": "x", "location": "Tarifa", "type": "full-time",
    })
    assert r.status_code == 400
    assert "company" in r.json()["detail"].lower()


def test_create_job_fills_company_and_normalizes_country(client, recruiter, post_job):
    _, headers = recruiter
    job = post_job(headers, languages=["English", "Spanish"], sports=["Kitesurfing"])
    assert job["company"] == "Tarifa Kite Center"
    assert job["companyId"] is not None
    assert job["country"] == "ES"
    assert job["published"] is True
    assert job["spam"] == "no"
    assert job["languages"] == ["English", "Spanish"]


def test_job_vocab_and_limits_are_validated(client, recruiter):
    _, headers = recruiter
    base = {"title": "T", "description": "D", "location": "L", "type": "full-time"}
    r = client.post("/api/jobs", headers=headers, json={**base, "languages": ["English", "Spanish", "German", "French"]})
    assert r.status_code == 422
    r = client.post("/api/jobs", headers=headers, json={**base, "sports": ["Golf"]})
    assert r.status_code == 422
    r = client.post("/api/jobs", headers=headers, json={**base, "pictures": ["a", "b", "c", "d"]})
    assert r.status_code == 422
    r = client.post("/api/jobs", headers=headers, json={**base, "type": "internship"})
    assert r.status_code == 422


def test_jobs_list_featured_first_then_newest(client, recruiter, post_job):
    _, headers = recruiter
    first = post_job(headers, title="First")
    second = post_job(headers, title="Second")
    third = post_job(headers, title="Third")
    _set(first["id"], featured=True)

    r = client.get("/api/jobs-list")
    assert r.status_code == 200
    assert [j["title"] for j in r.json()["jobs"]] == ["First", "Third", "Second"]

    featured = client.get("/api/jobs-list", params={"featured": "true"}).json()["jobs"]
    assert [j["id"] for j in featured] == [first["id"]]
    assert third["id"] not in [j["id"] for j in featured]


def test_jobs_list_hides_unpublished_and_spam_and_filters(client, recruiter, post_job):
    _, headers = recruiter
    post_job(headers, title="Kite Pro", sports=["Kitesurfing"])
    hidden = post_job(headers, title="Hidden", published=False)
    spam = post_job(headers, title="Spam")
    client.post(f"/api/jobs/{spam['id']}/report-spam", headers=headers)

    titles = [j["title"] for j in client.get("/api/jobs-list").json()["jobs"]]
    assert titles == ["Kite Pro"]
    assert hidden["published"] is False

    r = client.get("/api/jobs-list", params={"sport": "Surfing"})
    assert r.json()["jobs"] == []
    r = client.get("/api/jobs-list", params={"keyword": "pro", "country": "es"})
    assert [j["title"] for j in r.json()["jobs"]] == ["Kite Pro"]


def test_unpublished_job_only_visible_to_owner(client, recruiter, make_user, post_job):
    _, headers = recruiter
    _, other = make_user("job-seeker")
    job = post_job(headers, published=False)
    assert client.get(f"/api/jobs/{job['id']}").status_code == 404
    assert client.get(f"/api/jobs/{job['id']}", headers=other).status_code == 404
    assert client.get(f"/api/jobs/{job['id']}", headers=headers).status_code == 200


def test_visit_count_increments_for_visitors_only(client, recruiter, post_job):
    _, headers = recruiter
    job = post_job(headers)
    client.get(f"/api/jobs/{job['id']}")
    r = client.get(f"/api/jobs/{job['id']}")
    assert r.json()["job"]["visitCount"] == 2
    r = client.get(f"/api/jobs/{job['id']}", headers=headers)
    assert r.json()["job"]["visitCount"] == 2


def test_update_and_delete_require_owner(client, recruiter, make_user, post_job):
    _, headers = recruiter
    _, intruder = make_user("recruiter")
    job = post_job(headers)

    assert client.put(f"/api/jobs/{job['id']}", headers=intruder, json={"title": "Mine"}).status_code == 403
    r = client.put(f"/api/jobs/{job['id']}", headers=headers, json={"title": "Senior Instructor", "description": None})
    assert r.status_code == 200
    assert r.json()["job"]["title"] == "Senior Instructor"
    assert r.json()["job"]["description"] == job["description"]

    assert client.delete(f"/api/jobs/{job['id']}", headers=intruder).status_code == 403
    assert client.delete(f"/api/jobs/{job['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/jobs/{job['id']}").status_code == 404


def test_my_jobs_lists_own_jobs_including_unpublished(client, recruiter, post_job):
    _, headers = recruiter
    post_job(headers, title="A")
    post_job(headers, title="B", published=False)
    titles = sorted(j["title"] for j in client.get("/api/jobs/my", headers=headers).json()["jobs"])
    assert titles == ["A", "B"]


def test_null_lists_are_stored_empty_and_listing_keeps_working(client, recruiter, post_job):
    _, headers = recruiter
    job = post_job(headers, languages=["English"], sports=None)
    assert job["sports"] == []

    r = client.put(f"/api/jobs/{job['id']}", headers=headers, json={"languages": None, "pictures": None})
    assert r.status_code == 200, r.text
    assert r.json()["job"]["languages"] == []

    listed = client.get("/api/jobs-list")
    assert listed.status_code == 200
    assert listed.json()["jobs"][0]["languages"] == []
    assert client.get("/api/jobs").status_code == 200


def test_null_flags_do_not_overwrite_job_state(client, recruiter, post_job):
    _, headers = recruiter
    job = post_job(headers, published=None, applyByEmail=None)
    assert job["published"] is True and job["applyByEmail"] is False

    r = client.put(f"/api/jobs/{job['id']}", headers=headers, json={"published": None, "title": None, "applyByWebsite": None})
    assert r.status_code == 200, r.text
    assert r.json()["job"]["published"] is True
    assert r.json()["job"]["title"] == "Kite Instructor"
    assert len(client.get("/api/jobs-list").json()["jobs"]) == 1
