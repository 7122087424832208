from app.database import SessionLocal, init_db
from app.services import compensation_service

SAMPLE_EMPLOYEES = [
    {"ssid": "EMP001", "name": "Asha Rao", "role": "Senior Engineer", "performance": 9,
     "experience": 7, "salary": 2200000, "revenue": 6000000},
    {"ssid": "EMP002", "name": "Ravi Menon", "role": "Developer", "performance": "good",
     "experience": 3, "salary": 900000, "revenue": 1500000},
    {"ssid": "EMP003", "name": "Kiran Shah", "role": "Sales", "performance": "poor",
     "experience": 1, "salary": 600000, "revenue": 400000},
    {"ssid": "EMP004", "name": "Meera Iyer", "role": "Manager", "performance": 6,
     "experience": 10, "salary": 2400000, "revenue": 2500000},
    {"ssid": "EMP005", "name": "Dev Patel", "role": "Intern", "performance": "average",
     "experience": 0, "salary": 240000, "revenue": None},
]

init_db()
db = SessionLocal()

try:
    results = compensation_service.bulk_upsert_employees(db, SAMPLE_EMPLOYEES)
    for result in results:
        if result.get("ok"):
            print(f"Upserted {result['ssid']}")
        else:
            print(f"Skipped {result['ssid']}: {result['error']}")
finally:
    db.close()
