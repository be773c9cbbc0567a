from db.models import Follow, Skill
from utils import resp_msgs


class TestOwnProfile:

    def test_update_profile(self, test_client, login):
        headers, _ = login()

        response = test_client.put("/user", headers=headers, json={"name": "Dr. Sara", "bio": "Orthodontist"})

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Dr. Sara"
        assert body["bio"] == "Orthodontist"
        assert test_client.get("/user", headers=headers).json()["name"] == "Dr. Sara"

    def test_name_is_required(self, test_client, login):
        headers, _ = login()

        response = test_client.put("/user", headers=headers, json={"name": "   "})

        assert response.status_code == 422
        assert "name" in response.json()["errors"]

    def test_bio_length_is_limited(self, test_client, login):
        headers, _ = login()

        response = test_client.put("/user", headers=headers, json={"name": "Sara", "bio": "x" * 1001})

        assert response.status_code == 422
        assert "bio" in response.json()["errors"]


class TestSkills:

    def test_public_skill_list_is_sorted_by_name(self, test_client, skills):
        response = test_client.get("/skills")

        assert response.status_code == 200
        assert [skill["name"] for skill in response.json()] == sorted(skills)
        assert {skill["id"] for skill in response.json()} == set(skills.values())

    def test_sync_skills_replaces_set(self, test_client, login, skills):
        headers, _ = login()

        response = test_client.put("/user/skills", headers=headers,
                                   json={"skill_ids": [skills["Orthodontics"], skills["Dental implants"]]})
        assert response.status_code == 200
        assert {skill["name"] for skill in response.json()["skills"]} == {"Orthodontics", "Dental implants"}

        response = test_client.put("/user/skills", headers=headers,
                                   json={"skill_ids": [skills["Pediatric dentistry"]]})
        assert [skill["name"] for skill in response.json()["skills"]] == ["Pediatric dentistry"]

        response = test_client.put("/user/skills", headers=headers, json={"skill_ids": []})
        assert response.json()["skills"] == []

    def test_unknown_skill_ids_are_rejected(self, test_client, login, skills):
        headers, _ = login()

        response = test_client.put("/user/skills", headers=headers,
                                   json={"skill_ids": [skills["Orthodontics"], 9999]})

        assert response.status_code == 422
        assert response.json() == {"errors": {"skill_ids.1": ["The selected skill_ids.1 is invalid."]}}

    def test_skill_ids_must_be_present(self, test_client, login):
        headers, _ = login()

        response = test_client.put("/user/skills", headers=headers, json={})

        assert response.status_code == 422
        assert "skill_ids" in response.json()["errors"]


class TestFollows:

    def test_follow_and_unfollow(self, test_client, login, make_user, db_session):
        headers, me = login()
        other = make_user("+989350000000", name="Ali")

        response = test_client.post(f"/users/{other.id}/follow", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"message": "You are now following Ali."}
        assert test_client.get("/user/following-ids", headers=headers).json() == [other.id]

        profile = test_client.get(f"/users/{other.id}", headers=headers).json()
        assert profile["is_followed_by_current_user"] is True
        assert profile["followers_count"] == 1
        assert test_client.get("/user", headers=headers).json()["following_count"] == 1

        response = test_client.delete(f"/users/{other.id}/follow", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"message": "You have unfollowed Ali."}
        assert db_session.query(Follow).count() == 0

    def test_cannot_follow_self(self, test_client, login):
        headers, me = login()

        response = test_client.post(f"/users/{me['user']['id']}/follow", headers=headers)

        assert response.status_code == 422
        assert response.json() == {"message": resp_msgs.CANNOT_FOLLOW_SELF}

    def test_duplicate_follow_is_conflict(self, test_client, login, make_user):
        headers, _ = login()
        other = make_user("+989350000000", name="Ali")

        test_client.post(f"/users/{other.id}/follow", headers=headers)
        response = test_client.post(f"/users/{other.id}/follow", headers=headers)

        assert response.status_code == 409
        assert response.json() == {"message": resp_msgs.ALREADY_FOLLOWING}

    def test_unfollow_when_not_following(self, test_client, login, make_user):
        headers, _ = login()
        other = make_user("+989350000000", name="Ali")

        response = test_client.delete(f"/users/{other.id}/follow", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"message": resp_msgs.NOT_FOLLOWING}

    def test_unknown_user(self, test_client, login):
        headers, _ = login()

        assert test_client.get("/users/4242", headers=headers).status_code == 404
        assert test_client.post("/users/4242/follow", headers=headers).status_code == 404

    def test_followers_carry_follow_back_flag(self, test_client, login, make_user, db_session):
        headers, me = login()
        my_id = me["user"]["id"]
        mutual = make_user("+989350000001", name="Mina")
        fan = make_user("+989350000002", name="Reza")
        db_session.add_all([
            Follow(follower_id=mutual.id, following_id=my_id),
            Follow(follower_id=fan.id, following_id=my_id),
            Follow(follower_id=my_id, following_id=mutual.id),
        ])
        db_session.commit()

        response = test_client.get("/user/followers", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["current_page"] == 1
        flags = {item["name"]: item["is_followed_by_current_user"] for item in body["data"]}
        assert flags == {"Mina": True, "Reza": False}

    def test_following_is_paginated(self, test_client, login, make_user, db_session):
        headers, me = login()
        my_id = me["user"]["id"]
        for index in range(3):
            followed = make_user(f"+98935000001{index}", name=f"User {index}")
            db_session.add(Follow(follower_id=my_id, following_id=followed.id))
        db_session.commit()

        response = test_client.get("/user/following", headers=headers, params={"per_page": 2, "page": 2})

        body = response.json()
        assert body["total"] == 3
        assert body["per_page"] == 2
        assert body["last_page"] == 2
        assert len(body["data"]) == 1
        assert body["data"][0]["is_followed_by_current_user"] is True


class TestSearch:

    def test_empty_query_returns_empty_page(self, test_client, login, make_user):
        headers, _ = login()
        make_user("+989350000000", name="Ali")

        response = test_client.get("/search/users", headers=headers, params={"q": "   "})

        assert response.status_code == 200
        assert response.json() == {"data": [], "current_page": 1, "per_page": 15, "total": 0, "last_page": 1}

    def test_matches_name_case_insensitively_and_excludes_caller(self, test_client, login, make_user):
        headers, me = login()
        test_client.put("/user", headers=headers, json={"name": "Sara Ahmadi"})
        other = make_user("+989350000000", name="Sara Karimi")
        make_user("+989350000001", name="Reza")

        response = test_client.get("/search/users", headers=headers, params={"q": "sARa"})

        body = response.json()
        assert body["total"] == 1
        assert [item["id"] for item in body["data"]] == [other.id]
        assert body["data"][0]["is_followed_by_current_user"] is False

    def test_matches_skill_name(self, test_client, login, make_user, skills, db_session):
        headers, _ = login()
        dentist = make_user("+989350000000", name="Mina")
        dentist.skills = [db_session.get(Skill, skills["Orthodontics"])]
        db_session.commit()
        make_user("+989350000001", name="Reza")

        response = test_client.get("/search/users", headers=headers, params={"q": "ortho"})

        body = response.json()
        assert [item["name"] for item in body["data"]] == ["Mina"]
        assert body["data"][0]["skills"] == [{"id": skills["Orthodontics"], "name": "Orthodontics"}]

    def test_like_wildcards_are_literal(self, test_client, login, make_user):
        headers, _ = login()
        make_user("+989350000000", name="Ali")

        response = test_client.get("/search/users", headers=headers, params={"q": "%"})

        assert response.json()["total"] == 0

    def test_requires_authentication(self, test_client):
        assert test_client.get("/search/users", params={"q": "ali"}).status_code == 401
