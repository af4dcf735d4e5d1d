from fastapi.testclient import TestClient

from balancify.app import create_app

from conftest import HEADERS, make_settings


def submit(client, answers):
    return client.post("/api/questionnaire", json=answers, headers=HEADERS)


# --- security ---

def test_health_needs_no_api_key(client):
    response = client.get("/")
    assert response.status_code == 200


def test_missing_or_wrong_api_key_is_rejected(client, sample_answers):
    assert client.post("/api/questionnaire", json=sample_answers).status_code == 401
    assert client.post("/api/questionnaire", json=sample_answers, headers={"X-API-Key": "nope"}).status_code == 401


def test_unconfigured_server_key_is_a_server_error(sample_answers):
    with TestClient(create_app(make_settings(api_key=""))) as client:
        response = client.post("/api/questionnaire", json=sample_answers, headers=HEADERS)
    assert response.status_code == 500


# --- questionnaire & analysis ---

def test_submit_questionnaire_returns_full_analysis(client, sample_answers):
    response = submit(client, sample_answers)
    assert response.status_code == 201

    body = response.json()
    assert body["questionnaireId"]
    assert body["analysisId"]
    assert body["spendingBreakdown"]["food"] == 11000
    assert body["spendingBreakdown"]["housing"] == 17000
    assert body["needsWantsAnalysis"]["needs"]["food_essential"] == 7700
    assert body["goalTimeline"]["goalDescription"] == "Emergency fund"
    assert body["goalTimeline"]["timeToGoal"] == 20
    assert [g["feasibility"] for g in body["individualGoals"]] == ["Low", "Low"]
    assert body["insightsSource"] == "fallback"
    assert set(body["insights"]) == {
        "spendingPatterns", "optimizationOpportunities", "investmentRecommendations", "riskAnalysis", "goalAchievability",
    }
    assert body["recommendations"]["shortTerm"]


def test_stored_analysis_can_be_read_back(client, sample_answers):
    created = submit(client, sample_answers).json()

    response = client.get(f"/api/analysis/{created['questionnaireId']}", headers=HEADERS)
    assert response.status_code == 200

    body = response.json()
    assert body["analysisId"] == created["analysisId"]
    assert body["spendingBreakdown"] == created["spendingBreakdown"]
    assert body["individualGoals"] == created["individualGoals"]
    assert body["insights"] == created["insights"]


def test_unknown_analysis_is_404(client):
    response = client.get("/api/analysis/does-not-exist", headers=HEADERS)
    assert response.status_code == 404


def test_uncoercible_field_is_422_with_field_name(client):
    response = submit(client, {"monthly_income": "a lot"})

    assert response.status_code == 422
    assert response.json() == {"detail": [{"field": "monthly_income", "message": "'a lot' is not a number"}]}


def test_empty_submission_uses_defaults(client):
    response = submit(client, {})

    assert response.status_code == 201
    body = response.json()
    assert body["needsWantsAnalysis"]["needsPercentage"] == 0
    assert body["goalTimeline"]["timeToGoal"] is None
    assert body["goalTimeline"]["isReachable"] is False
    assert body["individualGoals"][0]["timeToAchieve"] is None


def test_insight_failure_still_returns_numbers(client, failing_insights, sample_answers):
    response = submit(client, sample_answers)

    assert response.status_code == 201
    body = response.json()
    assert body["insightsSource"] == "fallback"
    assert body["spendingBreakdown"]["food"] == 11000
    assert body["goalTimeline"]["milestones"]


# --- simulation ---

def test_simulate_stored_questionnaire(client, sample_answers):
    questionnaire_id = submit(client, sample_answers).json()["questionnaireId"]

    response = client.post("/api/simulate", headers=HEADERS, json={
        "questionnaireId": questionnaire_id,
        "simulation": {"incomeIncrease": 10, "expenseReduction": 20, "additionalSavings": 10, "investmentBoost": 0, "goalTarget": 600000},
    })
    assert response.status_code == 200

    body = response.json()
    assert body["comparison"]["monthlySavingsDelta"] == 5000
    assert body["comparison"]["annualSavingsDelta"] == 60000
    assert body["comparison"]["simulatedTimeToGoal"] == 30
    assert body["comparison"]["monthsSaved"] == 10
    assert body["simulatedBreakdown"]["housing"] == 14000
    assert len(body["projections"]["monthlyData"]) == 24
    assert body["projections"]["monthlyData"][11]["milestone"] == "Year 1 milestone"
    assert body["insights"]["timeToGoal"] == "30 months"
    assert body["insightsSource"] == "fallback"


def test_simulate_inline_profile_with_identity_parameters(client, sample_answers):
    response = client.post("/api/simulate", headers=HEADERS, json={"profile": sample_answers})

    assert response.status_code == 200
    body = response.json()
    assert body["simulatedBreakdown"] == body["originalBreakdown"]
    assert body["comparison"]["monthlySavingsDelta"] == 0


def test_simulate_unknown_questionnaire_is_404(client):
    response = client.post("/api/simulate", headers=HEADERS, json={"questionnaireId": "missing", "simulation": {}})
    assert response.status_code == 404


def test_simulate_needs_a_profile_source(client):
    response = client.post("/api/simulate", headers=HEADERS, json={"simulation": {"incomeIncrease": 5}})
    assert response.status_code == 422


def test_simulate_rejects_out_of_range_parameters(client, sample_answers):
    response = client.post("/api/simulate", headers=HEADERS, json={"profile": sample_answers, "simulation": {"expenseReduction": 150}})
    assert response.status_code == 422


def test_simulate_survives_insight_failure(client, failing_insights, sample_answers):
    response = client.post("/api/simulate", headers=HEADERS, json={"profile": sample_answers, "simulation": {"additionalSavings": 5}})

    assert response.status_code == 200
    body = response.json()
    assert body["insightsSource"] == "fallback"
    assert len(body["projections"]["goalTimeline"]) > 0


def test_oversized_amount_is_422_not_server_error(client):
    response = submit(client, {"monthly_income": 1000, "groceries_weekly": "1e28"})

    assert response.status_code == 422
    assert response.json() == {"detail": [{"field": "groceries_weekly", "message": "amount too large"}]}


def test_simulate_rejects_oversized_goal_target(client, sample_answers):
    response = client.post("/api/simulate", headers=HEADERS, json={"profile": sample_answers, "simulation": {"goalTarget": "1e28"}})
    assert response.status_code == 422
