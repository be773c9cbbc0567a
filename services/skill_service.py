import json
from typing import List

import redis
from sqlalchemy.orm import Session

from db.models import Skill
from db.schemas import SkillResponse
from utils import app_logger
from utils.config import SKILLS_CACHE_TTL
from utils.redis_helper import RedisHelper

logger = app_logger.createLogger("app")

SKILLS_CACHE_KEY = "skills:all"

DEFAULT_SKILLS = [
    "ایمپلنت دندانی",
    "ارتودنسی",
    "دندانپزشکی زیبایی",
    "جراحی لثه",
    "پروتزهای دندانی",
    "اندودانتیکس (درمان ریشه)",
    "رادیولوژی دهان و دندان",
    "دندانپزشکی کودکان",
    "تجهیزات پزشکی",
    "بازاریابی مدیکال",
]


class SkillService:

    @staticmethod
    def _load_skills(db: Session) -> List[dict]:
        skills = db.query(Skill).order_by(Skill.name).all()
        return [SkillResponse.model_validate(skill).model_dump() for skill in skills]

    @staticmethod
    def list_skills(db: Session) -> List[dict]:
        """All skills ordered by name. Served from redis when it is configured and reachable."""
        if not RedisHelper.is_configured():
            return SkillService._load_skills(db)

        try:
            cache = RedisHelper()
            cached = cache.get(SKILLS_CACHE_KEY)
            if cached:
                return json.loads(cached)
        except redis.RedisError as e:
            logger.warning(f"Skills cache unavailable, reading from database. Error: {e}")
            return SkillService._load_skills(db)

        skills = SkillService._load_skills(db)
        try:
            cache.set_with_ttl(SKILLS_CACHE_KEY, json.dumps(skills), SKILLS_CACHE_TTL)
        except redis.RedisError as e:
            logger.warning(f"Could not cache skills. Error: {e}")
        return skills

    @staticmethod
    def invalidate_cache():
        if not RedisHelper.is_configured():
            return
        try:
            RedisHelper().delete(SKILLS_CACHE_KEY)
        except redis.RedisError as e:
            logger.warning(f"Could not invalidate skills cache. Error: {e}")

    @staticmethod
    def seed_default_skills(db: Session, names: List[str] = None) -> int:
        """Find-or-create each skill by name, returns how many were created"""
        created = 0
        for name in names or DEFAULT_SKILLS:
            if not db.query(Skill).filter(Skill.name == name).first():
                db.add(Skill(name=name))
                created += 1
        db.commit()
        if created:
            SkillService.invalidate_cache()
        logger.info(f"Seeded {created} skills")
        return created
