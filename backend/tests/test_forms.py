import httpx
import pytest

from jobboard.client.api import ApiClient, ApiError, JobBoardApi
from jobboard.client.forms import CompanyForm, CoordinatesRequired, CVForm, FormInvalid, JobForm
from jobboard.main import app

PNG = ("spot.png", b"\x89PNG" + b"\x00" * 16, "image/png")

TARIFA = {
    "displayName": "Tarifa, Spain",
    "latitude": 36.0139,
    "longitude": -5.6044,
    "address": {"street": "Calle Batalla del Salado", "city": "Tarifa", "state": "Andalusia", "postalCode": "11380", "country": "es"},
}


async def _signed_in(role, email):
    api = JobBoardApi(ApiClient("http://testserver", transport=httpx.ASGITransport(app=app)))
    await api.auth.register(email, "secret123", role.title(), role)
    return api


@pytest.mark.asyncio
async def test_company_form_blocks_save_without_location():
    api = await _signed_in("recruiter", "rec@example.com")
    form = CompanyForm()
    form.name = "Tarifa Kite Center"
    form.pictures.add([PNG])
    with pytest.raises(CoordinatesRequired):
        await form.save(api)
    assert form.pictures.pending, "nothing is uploaded when the save is blocked"
    with pytest.raises(ApiError) as err:
        await api.company.mine()
    assert err.value.status == 404
    await api.aclose()


@pytest.mark.asyncio
async def test_company_then_job_flow():
    api = await _signed_in("recruiter", "flow@example.com")
    form = CompanyForm()
    form.name = "Tarifa Kite Center"
    form.apply_location(TARIFA)
    form.activities.add("Kitesurfing")
    form.pictures.add([PNG])
    form.logo.add([PNG])

    company = await form.save(api)
    assert company["coordinates"] == {"latitude": 36.0139, "longitude": -5.6044}
    assert company["address"]["country"] == "ES"
    assert company["offeredActivities"] == ["Kitesurfing"]
    assert company["pictures"][0].startswith("/uploads/company-pictures/")
    assert company["logo"].startswith("/uploads/company-logos/")

    form.description = "Flat water lagoon"
    updated = await form.save(api)
    assert updated["id"] == company["id"]
    assert updated["pictures"] == company["pictures"]

    job_form = JobForm(company=company)
    job_form.title = "Kite Instructor"
    job_form.description = "Teach beginners"
    job_form.location = "Tarifa"
    job_form.languages.add("English")
    job_form.apply_by["Email"] = {"enabled": True, "value": "jobs@example.com"}
    job = await job_form.save(api)
    assert job["company"] == "Tarifa Kite Center"
    assert job["applyByEmail"] is True
    assert job["applicationEmail"] == "jobs@example.com"

    edit = JobForm(job, company=company)
    edit.title = "Head Kite Instructor"
    assert (await edit.save(api))["title"] == "Head Kite Instructor"
    await api.aclose()


def test_job_form_validation():
    form = JobForm(company={"coordinates": {"latitude": 1, "longitude": 2}})
    form.apply_by["Website"]["enabled"] = True
    errors = form.validate()
    assert "Title is required" in errors
    assert any("website" in e for e in errors)


@pytest.mark.asyncio
async def test_job_form_requires_located_company():
    form = JobForm(company={"name": "No map"})
    form.title, form.description, form.location = "T", "D", "L"
    with pytest.raises(CoordinatesRequired):
        await form.save(api=None)


@pytest.mark.asyncio
async def test_cv_form_create_and_update():
    api = await _signed_in("job-seeker", "cv@example.com")
    form = CVForm()
    with pytest.raises(FormInvalid):
        await form.save(api)

    form.full_name = "Ana Surf"
    form.email = "ana@example.com"
    form.languages.add("Spanish")
    form.work_areas.add("Instructor")
    form.professional_certifications.add("IKO Level 1 Instructor")
    form.add_experience(company="Surf Camp", position="Coach", start_date="2021-06")
    form.pictures.add([PNG])
    cv = await form.save(api)
    assert cv["lookingForWorkInAreas"] == ["Instructor"]
    assert cv["experience"][0]["startDate"] == "2021-06"
    assert cv["pictures"][0].startswith("/uploads/cv-pictures/")

    again = CVForm(cv)
    again.summary = "Seasonal instructor"
    updated = await again.save(api)
    assert updated["id"] == cv["id"]
    assert updated["summary"] == "Seasonal instructor"
    assert updated["experience"][0]["company"] == "Surf Camp"
    await api.aclose()


def test_discard_releases_every_preview():
    company = CompanyForm({"id": 1, "name": "Spot", "pictures": ["/uploads/company-pictures/a.png"]})
    company.pictures.add([PNG])
    company.logo.add([PNG])
    company.discard()
    assert company.pictures.live_previews == set() and company.logo.live_previews == set()
    assert company.pictures.pending == [] and company.logo.pending == []
    assert company.pictures.kept == ["/uploads/company-pictures/a.png"]

    for form in (JobForm(company={}), CVForm()):
        form.pictures.add([PNG, PNG])
        assert len(form.pictures.live_previews) == 2
        form.discard()
        assert form.pictures.live_previews == set()
        assert form.pictures.previews() == []
