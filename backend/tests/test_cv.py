def test_cv_lifecycle(client, make_user, make_cv):
    _, headers = make_user("job-seeker")
    assert client.get("/api/cv", headers=headers).status_code == 404

    cv = make_cv(headers, languages=["English"], experience=[{"company": "Surf Camp", "position": "Coach", "startDate": "2022-05"}])
    assert cv["published"] is True
    assert cv["experience"][0]["startDate"] == "2022-05"

    dup = client.post("/api/cv", headers=headers, json={"fullName": "X", "email": "x@example.com"})
    assert dup.status_code == 400

    r = client.put("/api/cv", headers=headers, json={"summary": "Ten years on the water", "fullName": None})
    assert r.status_code == 200
    assert r.json()["cv"]["summary"] == "Ten years on the water"
    assert r.json()["cv"]["fullName"] == "Ana Surf"

    r = client.post("/api/cv/toggle-publish", headers=headers)
    assert r.json()["published"] is False

    assert client.delete("/api/cv", headers=headers).status_code == 200
    assert client.get("/api/cv", headers=headers).status_code == 404


def test_cv_vocab_validation(client, make_user):
    _, headers = make_user("job-seeker")
    r = client.post("/api/cv", headers=headers, json={"fullName": "A", "email": "a@x.com", "lookingForWorkInAreas": ["Astronaut"]})
    assert r.status_code == 422


def test_cv_endpoints_are_job_seeker_only(client, make_user):
    _, headers = make_user("recruiter")
    assert client.get("/api/cv", headers=headers).status_code == 403


def test_candidates_list_returns_filter_options(client, make_user, make_cv):
    _, rec = make_user("recruiter")
    _, s1 = make_user("job-seeker")
    _, s2 = make_user("job-seeker")
    _, s3 = make_user("job-seeker")
    make_cv(s1, languages=["English", "Spanish"], experienceAndSkill=["Kitesurfing"], lookingForWorkInAreas=["Instructor"])
    make_cv(s2, languages=["German"], professionalCertifications=["IKO Level 1 Instructor"])
    make_cv(s3, languages=["French"])
    client.post("/api/cv/toggle-publish", headers=s3)

    assert client.get("/api/candidates-list").status_code == 401
    _, seeker = make_user("job-seeker")
    assert client.get("/api/candidates-list", headers=seeker).status_code == 403

    r = client.get("/api/candidates-list", headers=rec)
    assert r.status_code == 200
    body = r.json()
    assert len(body["cvs"]) == 2
    assert body["filters"] == {
        "languages": ["English", "German", "Spanish"],
        "workAreas": ["Instructor"],
        "sports": ["Kitesurfing"],
        "certifications": ["IKO Level 1 Instructor"],
    }
    assert body["cvs"][0]["jobSeeker"]["email"].endswith("@example.com")


def test_candidate_detail_and_public_resumes(client, make_user, make_cv):
    _, rec = make_user("recruiter")
    _, seeker = make_user("job-seeker")
    cv = make_cv(seeker)

    r = client.get(f"/api/candidates-list/{cv['id']}", headers=rec)
    assert r.status_code == 200
    assert r.json()["cv"]["fullName"] == "Ana Surf"

    assert len(client.get("/api/resumes").json()["resumes"]) == 1
    client.post("/api/cv/toggle-publish", headers=seeker)
    assert client.get("/api/resumes").json()["resumes"] == []
    assert client.get(f"/api/candidates-list/{cv['id']}", headers=rec).status_code == 404


def test_null_lists_on_cv_are_stored_empty(client, make_user, make_cv):
    _, seeker = make_user("job-seeker")
    cv = make_cv(seeker, skills=None, experience=None, languages=["English"])
    assert cv["skills"] == [] and cv["experience"] == []

    r = client.put("/api/cv", headers=seeker, json={"languages": None, "lookingForWorkInAreas": None})
    assert r.status_code == 200, r.text
    assert r.json()["cv"]["languages"] == []

    _, rec = make_user("recruiter")
    assert client.get("/api/candidates-list", headers=rec).status_code == 200
