def test_admin_routes_require_admin(client, make_user):
    _, headers = make_user("recruiter")
    assert client.get("/api/admin/users", headers=headers).status_code == 403
    assert client.get("/api/admin/statistics").status_code == 401


def test_statistics(client, admin_headers, recruiter, make_user, make_cv, post_job):
    _, rec = recruiter
    post_job(rec)
    _, seeker = make_user("job-seeker")
    make_cv(seeker)
    stats = client.get("/api/admin/statistics", headers=admin_headers).json()["statistics"]
    assert stats == {"jobSeekers": 1, "recruiters": 1, "jobs": 1, "cvs": 1, "companies": 1}


def test_list_users_includes_jobs_and_cv(client, admin_headers, recruiter, make_user, make_cv, post_job):
    _, rec = recruiter
    post_job(rec)
    _, seeker = make_user("job-seeker")
    make_cv(seeker)
    users = {u["role"]: u for u in client.get("/api/admin/users", headers=admin_headers).json()["users"]}
    assert len(users["recruiter"]["jobs"]) == 1
    assert users["job-seeker"]["cv"]["fullName"] == "Ana Surf"


def test_delete_recruiter_cascades_jobs_and_is_audited(client, admin_headers, recruiter, post_job):
    rec_user, rec = recruiter
    job = post_job(rec)
    r = client.delete(f"/api/admin/users/{rec_user['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert client.get(f"/api/jobs/{job['id']}").status_code == 404
    assert client.get("/api/companies-list").json()["companies"] == []

    logs = client.get("/api/admin/audit-logs", headers=admin_headers,
                      params={"action": "delete", "entityType": "user"}).json()
    assert logs["total"] == 1
    entry = logs["auditLogs"][0]
    assert entry["entityId"] == rec_user["id"]
    assert entry["userEmail"] == "admin@example.com"
    assert entry["changes"]["before"]["role"] == "recruiter"


def test_update_user_role_and_password(client, admin_headers, make_user):
    user, _ = make_user("job-seeker", email="promote@example.com")
    r = client.put(f"/api/admin/users/{user['id']}", headers=admin_headers, json={"role": "recruiter", "password": "fresh-pass"})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "recruiter"
    assert client.post("/api/auth/login", json={"email": "promote@example.com", "password": "fresh-pass"}).status_code == 200

    entry = client.get("/api/admin/audit-logs", headers=admin_headers, params={"action": "update"}).json()["auditLogs"][0]
    assert entry["changes"]["fields"] == ["role"]
    assert entry["metadata"] == {"passwordChanged": True}


def test_admin_can_feature_and_flag_jobs(client, admin_headers, recruiter, post_job):
    _, rec = recruiter
    job = post_job(rec)
    r = client.put(f"/api/admin/jobs/{job['id']}", headers=admin_headers, json={"featured": True})
    assert r.json()["job"]["featured"] is True
    client.put(f"/api/admin/jobs/{job['id']}", headers=admin_headers, json={"spam": "yes"})
    assert client.get("/api/jobs-list").json()["jobs"] == []
    assert len(client.get("/api/admin/jobs", headers=admin_headers).json()["jobs"]) == 1


def test_admin_company_update_and_delete(client, admin_headers, recruiter, post_job):
    _, rec = recruiter
    post_job(rec)
    company = client.get("/api/admin/companies", headers=admin_headers).json()["companies"][0]
    assert company["owner"]["email"].startswith("recruiter")

    r = client.put(f"/api/admin/companies/{company['id']}", headers=admin_headers, json={"featured": True})
    assert r.json()["company"]["featured"] is True

    assert client.delete(f"/api/admin/companies/{company['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/jobs").json()["jobs"] == []
    assert client.get("/api/admin/companies/9999", headers=admin_headers).status_code == 404


def test_audit_logs_paginate_newest_first(client, admin_headers, make_user):
    for _ in range(3):
        make_user("job-seeker")
    page = client.get("/api/admin/audit-logs", headers=admin_headers,
                      params={"action": "register", "limit": 2, "offset": 0}).json()
    assert page["total"] == 3
    assert len(page["auditLogs"]) == 2
    emails = [e["userEmail"] for e in page["auditLogs"]]
    assert emails == ["job-seeker3@example.com", "job-seeker2@example.com"]


def test_admin_cvs(client, admin_headers, make_user, make_cv):
    _, seeker = make_user("job-seeker")
    make_cv(seeker)
    cvs = client.get("/api/admin/cvs", headers=admin_headers).json()["cvs"]
    assert cvs[0]["jobSeeker"]["name"] == "Job-Seeker 1"


def test_admin_password_reset_enforces_minimum_length(client, admin_headers, make_user):
    user, _ = make_user("job-seeker", email="short@example.com")
    r = client.put(f"/api/admin/users/{user['id']}", headers=admin_headers, json={"password": "abc", "name": "Renamed"})
    assert r.status_code == 400
    assert "6 characters" in r.json()["detail"]
    assert client.post("/api/auth/login", json={"email": "short@example.com", "password": "secret123"}).status_code == 200
    assert client.get(f"/api/admin/users/{user['id']}", headers=admin_headers).json()["user"]["name"] != "Renamed"
