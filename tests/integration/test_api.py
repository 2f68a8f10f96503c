"""
HTTP API: routing, auth, error bodies and the main flows end to end.
"""


class TestPublicEndpoints:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_languages_are_listed_by_name(self, client, world):
        response = await client.get("/api/languages")
        assert response.status_code == 200
        assert [lang["code"] for lang in response.json()] == ["fr", "es"]

    async def test_language_detail_lists_active_lessons(self, client, world):
        response = await client.get(f"/api/languages/{world.spanish.id}")
        assert response.status_code == 200
        assert [lesson["title"] for lesson in response.json()["lessons"]] == ["Greetings", "Food"]

    async def test_lesson_detail_hides_answers(self, client, world):
        response = await client.get(f"/api/lessons/{world.greetings.id}")
        assert response.status_code == 200
        exercises = response.json()["exercises"]
        assert len(exercises) == 2
        assert all("correct_answer" not in e for e in exercises)

    async def test_lesson_list_counts_active_exercises(self, client, world):
        response = await client.get(f"/api/lessons/language/{world.spanish.id}")
        assert [(row["title"], row["exercise_count"]) for row in response.json()] == [("Greetings", 2), ("Food", 1)]

    async def test_unknown_lesson(self, client, world):
        response = await client.get("/api/lessons/9999")
        assert response.status_code == 404
        assert response.json()["error"] == "lesson_not_found"

    async def test_leaderboard_needs_no_auth(self, client, world):
        response = await client.get("/api/achievements/leaderboard")
        assert response.status_code == 200
        entry = response.json()[0]
        assert entry["rank"] == 1
        assert entry["username"] == "ana"
        assert not entry["is_current_user"]

    async def test_leaderboard_flags_signed_in_caller(self, client, auth_headers):
        response = await client.get("/api/achievements/leaderboard", headers=auth_headers)
        assert response.json()[0]["is_current_user"]

    async def test_leaderboard_ignores_bad_token(self, client, world):
        response = await client.get("/api/achievements/leaderboard", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 200


class TestAuth:
    async def test_missing_token(self, client, world):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json() == {"error": "unauthenticated", "detail": "Access token required"}

    async def test_malformed_token(self, client, world):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 403
        assert response.json()["error"] == "invalid_token"

    async def test_me(self, client, auth_headers):
        response = await client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "ana"
        assert "hashed_password" not in body

    async def test_logout_ends_session(self, client, auth_headers):
        assert (await client.post("/api/auth/logout", headers=auth_headers)).status_code == 200
        response = await client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == 401
        assert response.json()["error"] == "session_expired"


class TestLessonFlow:
    async def test_complete_lesson(self, client, world, auth_headers):
        response = await client.post(
            f"/api/lessons/{world.greetings.id}/complete",
            json={"score": 30, "time_spent": 45},
            headers=auth_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["final_score"] == 20
        assert body["experience_gained"] == 2
        assert [a["type"] for a in body["unlocked_achievements"]] == ["perfect_score"]

        progress = await client.get(f"/api/lessons/{world.greetings.id}/progress", headers=auth_headers)
        assert progress.json()["user_progress"]["score"] == 20

    async def test_negative_score_is_rejected(self, client, world, auth_headers):
        response = await client.post(
            f"/api/lessons/{world.greetings.id}/complete",
            json={"score": -1},
            headers=auth_headers,
        )
        assert response.status_code == 422
        assert response.json()["error"] == "validation_failed"

    async def test_not_enrolled(self, client, world, auth_headers):
        response = await client.post(
            f"/api/lessons/{world.bonjour.id}/complete",
            json={"score": 10},
            headers=auth_headers,
        )
        assert response.status_code == 403
        assert response.json()["error"] == "not_enrolled"

    async def test_completion_requires_auth(self, client, world):
        response = await client.post(f"/api/lessons/{world.greetings.id}/complete", json={"score": 10})
        assert response.status_code == 401

    async def test_next_lesson(self, client, world, auth_headers):
        response = await client.get(f"/api/lessons/{world.greetings.id}/next", headers=auth_headers)
        assert response.json()["next_lesson"]["title"] == "Food"

        # the inactive lesson after Food is skipped
        response = await client.get(f"/api/lessons/{world.food.id}/next", headers=auth_headers)
        assert response.json() == {"next_lesson": None}


class TestEnrollmentRoutes:
    async def test_enroll_lifecycle(self, client, world, auth_headers):
        url = f"/api/languages/{world.french.id}/enroll"

        assert (await client.post(url, headers=auth_headers)).status_code == 201
        conflict = await client.post(url, headers=auth_headers)
        assert conflict.status_code == 409
        assert conflict.json()["error"] == "conflict"

        assert (await client.delete(url, headers=auth_headers)).status_code == 200
        assert (await client.post(url, headers=auth_headers)).status_code == 200

    async def test_enrollments_with_progress(self, client, world, auth_headers):
        await client.post(
            f"/api/lessons/{world.greetings.id}/complete", json={"score": 10}, headers=auth_headers
        )
        response = await client.get("/api/languages/enrollments", headers=auth_headers)
        [enrollment] = response.json()
        assert enrollment["language"]["code"] == "es"
        assert enrollment["completed_lessons"] == 1


class TestUserRoutes:
    async def test_streak_check_in(self, client, world, auth_headers):
        first = await client.post("/api/users/streak", headers=auth_headers)
        second = await client.post("/api/users/streak", headers=auth_headers)
        assert first.json()["streak"] == 1
        assert second.json()["streak"] == 1

    async def test_profile_update(self, client, world, auth_headers):
        response = await client.put(
            "/api/users/profile",
            json={"first_name": "  Ana  ", "avatar": "https://example.com/ana.png"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["first_name"] == "Ana"
        assert body["avatar"] == "https://example.com/ana.png"

    async def test_stats_and_available_achievements(self, client, world, auth_headers):
        await client.post(
            f"/api/lessons/{world.greetings.id}/complete", json={"score": 20}, headers=auth_headers
        )

        stats = (await client.get("/api/users/stats", headers=auth_headers)).json()
        assert stats["completed_lessons"] == 1
        assert stats["total_achievements"] == 1

        available = (await client.get("/api/achievements/available", headers=auth_headers)).json()
        by_type = {a["type"]: a for a in available}
        assert by_type["lesson_complete"]["progress"] == 1
        assert by_type["perfect_score"]["progress"] == 1

    async def test_progress_overview_and_analytics(self, client, world, auth_headers):
        await client.post(
            f"/api/lessons/{world.food.id}/complete", json={"score": 40, "time_spent": 90}, headers=auth_headers
        )

        overview = (await client.get("/api/progress/overview", headers=auth_headers)).json()["overview"]
        assert overview[0]["language"]["code"] == "es"
        assert overview[0]["total_score"] == 40

        language = (await client.get(f"/api/progress/language/{world.spanish.id}", headers=auth_headers)).json()
        assert language["statistics"]["completed_lessons"] == 1
        assert language["statistics"]["total_lessons"] == 2

        analytics = (await client.get("/api/progress/analytics", headers=auth_headers)).json()
        assert analytics["total_lessons_completed"] == 1
        assert analytics["average_time_per_lesson"] == 90
        assert sum(day["lessons_completed"] for day in analytics["daily_progress"].values()) == 1
