from db.db_conn import SessionLocal, init_db
from services.skill_service import SkillService


def main():
    init_db()
    db = SessionLocal()
    try:
        created = SkillService.seed_default_skills(db=db)
        print(f"Seeded {created} skills")
    finally:
        db.close()


if __name__ == "__main__":
    main()
