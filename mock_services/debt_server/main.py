from fastapi import FastAPI, HTTPException

app = FastAPI(title="Mock Debt Service", version="1.0.0")

# Debt personas keyed by user id, shaped like the real debt service payload
DEBTS = {
    "user_cards": [
        {"debt_id": 101, "name": "Visa", "current_balance": "4200.00", "interest_rate": "22.99", "min_payment": "126.00"},
        {"debt_id": 102, "name": "Mastercard", "current_balance": "1800.00", "interest_rate": "27.49", "min_payment": "54.00"},
        {"debt_id": 103, "name": "Store Card", "current_balance": "450.00", "interest_rate": "29.99", "min_payment": "25.00"},
    ],
    "user_student": [
        {"debt_id": 201, "name": "Student Loan", "current_balance": "24000.00", "interest_rate": "5.50", "min_payment": "260.00"},
        {"debt_id": 202, "name": "Car Loan", "current_balance": "9500.00", "interest_rate": "6.90", "min_payment": "310.00"},
    ],
    "user_underwater": [
        {"debt_id": 301, "name": "Payday Loan", "current_balance": "15000.00", "interest_rate": "36.00", "min_payment": "150.00"},
    ],
    "user_paid_off": [
        {"debt_id": 401, "name": "Old Card", "current_balance": "0.00", "interest_rate": "19.99", "min_payment": "25.00"},
    ],
    "user_debt_free": [],
}


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/internal/debts")
def get_debts(user_id: str):
    if user_id not in DEBTS:
        raise HTTPException(status_code=404, detail="user not found")
    return {"user_id": user_id, "debts": DEBTS[user_id]}
