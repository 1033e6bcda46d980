"""
web 라우트 테스트

FastAPI TestClient로 상태 코드 매핑과 응답 형식(camelCase, 금액 문자열) 확인
"""

from dataclasses import replace
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from core.config.loader import LedgerConfig
from core.ledger.facade import Ledger
from core.ledger.journal import JournalInput, JournalLine
from web.app import app
from web.dependencies import set_ledger
from web.errors import status_for


@pytest.fixture
def ledger() -> Ledger:
    """요청마다 공유되는 빈 장부 주입"""
    instance = Ledger(LedgerConfig())
    set_ledger(instance)
    yield instance
    set_ledger(None)


@pytest.fixture
def client(ledger: Ledger) -> TestClient:
    return TestClient(app)


def _journal_body(debit: str = "1102", credit: str = "5101", amount: str = "100", **extra) -> dict:
    body = {
        "date": "2026-04-10",
        "description": "웹 분개",
        "lines": [
            {"accountCode": debit, "debitAmount": amount},
            {"accountCode": credit, "creditAmount": amount},
        ],
    }
    body.update(extra)
    return body


class TestStatusMapping:
    """에러 코드 → HTTP 상태 코드"""

    def test_known_codes(self) -> None:
        assert status_for("VALIDATION_ERROR") == 422
        assert status_for("RULE_NOT_FOUND") == 422
        assert status_for("TRANSFER_LIMIT_EXCEEDED") == 422
        assert status_for("STATE_ERROR") == 409
        assert status_for("NOT_FOUND") == 404
        assert status_for("ACCOUNT_NOT_FOUND") == 404
        assert status_for("CONSISTENCY_ERROR") == 500
        assert status_for("IMPORT_PAYLOAD_ERROR") == 400

    def test_default(self) -> None:
        assert status_for(None) == 400
        assert status_for("UNKNOWN") == 400


class TestHealth:
    def test_health(self, client: TestClient, ledger: Ledger) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["accounts"] == len(ledger.accounts)
        assert data["journals"] == 0


class TestJournalRoutes:
    """분개 API 테스트"""

    def test_create(self, client: TestClient) -> None:
        """생성 201, camelCase 응답, 금액 문자열"""
        response = client.post("/api/journals", json=_journal_body())

        assert response.status_code == 201
        journal = response.json()["journal"]
        assert journal["number"] == "J000001"
        assert journal["status"] == "DRAFT"
        assert journal["division"] == "MANAGEMENT"
        assert journal["details"][0]["debitAmount"] == "100"

    def test_create_unbalanced(self, client: TestClient) -> None:
        body = _journal_body()
        body["lines"][1]["creditAmount"] = "90"

        response = client.post("/api/journals", json=body)

        assert response.status_code == 422
        assert response.json()["detail"]["errorCode"] == "VALIDATION_ERROR"

    def test_create_restricted_transfer(self, client: TestClient) -> None:
        """수선적립금에서 관리회계로의 이체는 422"""
        response = client.post("/api/journals", json=_journal_body("1102", "1103"))

        assert response.status_code == 422
        assert response.json()["detail"]["errorCode"] == "TRANSFER_LIMIT_EXCEEDED"

    def test_post_twice(self, client: TestClient) -> None:
        """이미 전기된 분개 재전기는 409"""
        journal_id = client.post("/api/journals", json=_journal_body()).json()["journal"]["id"]

        first = client.post(f"/api/journals/{journal_id}/post")
        second = client.post(f"/api/journals/{journal_id}/post")

        assert first.status_code == 200
        assert first.json()["journal"]["status"] == "POSTED"
        assert second.status_code == 409
        assert second.json()["detail"]["errorCode"] == "STATE_ERROR"

    def test_not_found(self, client: TestClient) -> None:
        assert client.get("/api/journals/missing").status_code == 404
        assert client.post("/api/journals/missing/post").status_code == 404

    def test_cancel(self, client: TestClient) -> None:
        journal_id = client.post(
            "/api/journals", json=_journal_body(autoPost=True)
        ).json()["journal"]["id"]

        response = client.post(f"/api/journals/{journal_id}/cancel", json={"reason": "중복 입력"})

        assert response.status_code == 200
        assert response.json()["journal"]["cancellationReason"] == "중복 입력"

    def test_cancel_without_reason(self, client: TestClient) -> None:
        journal_id = client.post("/api/journals", json=_journal_body()).json()["journal"]["id"]

        response = client.post(f"/api/journals/{journal_id}/cancel", json={})

        assert response.status_code == 422

    def test_update_and_delete(self, client: TestClient) -> None:
        journal_id = client.post("/api/journals", json=_journal_body()).json()["journal"]["id"]

        updated = client.patch(f"/api/journals/{journal_id}", json={"description": "수정"})
        deleted = client.delete(f"/api/journals/{journal_id}")

        assert updated.json()["journal"]["description"] == "수정"
        assert deleted.status_code == 200
        assert client.get(f"/api/journals/{journal_id}").status_code == 404

    def test_list_and_summary(self, client: TestClient) -> None:
        client.post("/api/journals", json=_journal_body(autoPost=True))
        client.post("/api/journals", json=_journal_body())

        listed = client.get("/api/journals", params={"status": "POSTED"}).json()
        summary = client.get("/api/journals/summary").json()

        assert listed["total"] == 1
        assert summary["draft"] == 1
        assert summary["posted_debit_total"] == "100"


class TestAccountRoutes:
    """계정과목 / 회계구분 API 테스트"""

    def test_get_account(self, client: TestClient) -> None:
        response = client.get("/api/accounts/1102")

        assert response.status_code == 200
        assert response.json()["normalBalance"] == "DEBIT"

    def test_unknown_account(self, client: TestClient) -> None:
        response = client.get("/api/accounts/9999")

        assert response.status_code == 404
        assert response.json()["detail"]["errorCode"] == "ACCOUNT_NOT_FOUND"

    def test_upsert_missing_parent(self, client: TestClient) -> None:
        response = client.put(
            "/api/accounts/7001", json={"code": "7001", "name": "잘못된계정", "type": "EXPENSE", "parentCode": "7000"}
        )

        assert response.status_code == 422

    def test_divisions(self, client: TestClient) -> None:
        codes = {d["code"] for d in client.get("/api/divisions").json()}

        assert {"MANAGEMENT", "RESERVE", "PARKING"} <= codes


class TestTransactionRoutes:
    """거래 API 테스트"""

    def test_record(self, client: TestClient) -> None:
        body = {
            "id": "tx-1",
            "type": "income",
            "accountCode": "5101",
            "amount": "10000",
            "occurredOn": "2026-04-01",
        }

        response = client.post("/api/transactions/record", json=body)

        assert response.status_code == 201
        codes = [line["accountCode"] for line in response.json()["journal"]["details"]]
        assert codes == ["1301", "5101"]

    def test_rule_not_found(self, client: TestClient) -> None:
        body = {
            "id": "tx-1",
            "type": "income",
            "accountCode": "5101",
            "amount": "10000",
            "occurredOn": "2026-04-01",
            "status": "partial",
        }

        response = client.post("/api/transactions/record", json=body)

        assert response.status_code == 422
        assert response.json()["detail"]["errorCode"] == "RULE_NOT_FOUND"

    def test_rules(self, client: TestClient) -> None:
        rules = client.get("/api/transactions/rules").json()

        assert rules[0]["priority"] >= rules[-1]["priority"]


class TestReportRoutes:
    """보고서 API 테스트"""

    def test_trial_balance(self, client: TestClient) -> None:
        client.post("/api/journals", json=_journal_body(autoPost=True))

        response = client.get("/api/reports/trial-balance")

        assert response.status_code == 200
        data = response.json()
        assert data["totalDebit"] == "100"
        assert data["isBalanced"] is True

    def test_balance_sheet(self, client: TestClient) -> None:
        client.post("/api/journals", json=_journal_body(autoPost=True))

        data = client.get("/api/reports/balance-sheet", params={"as_of": "2026-04-30"}).json()

        assert data["totalAssets"] == "100"
        assert data["totalLiabilitiesAndEquity"] == "100"
        assert data["equity"][-1]["code"] == "9999"

    def test_consistency_error(self, client: TestClient, ledger: Ledger) -> None:
        """전기 분개 차대 불일치는 500"""
        data = JournalInput(
            date="2026-04-10",
            description="관리비 입금",
            lines=[
                JournalLine("1102", debit_amount=Decimal("100")),
                JournalLine("5101", credit_amount=Decimal("100")),
            ],
        )
        created = ledger.create_journal(data, auto_post=True).journal
        broken = replace(
            created,
            lines=(created.lines[0], replace(created.lines[1], credit_amount=Decimal("1"))),
        )
        ledger.journals._journals[created.id] = broken

        response = client.get("/api/reports/trial-balance")

        assert response.status_code == 500
        assert response.json()["detail"]["errorCode"] == "CONSISTENCY_ERROR"


class TestDataRoutes:
    """가져오기/내보내기 API 테스트"""

    def test_import_invalid_payload(self, client: TestClient) -> None:
        response = client.post("/api/data/import", json={"journals": [{"date": "2026-04-01"}]})

        assert response.status_code == 400
        assert response.json()["detail"]["errorCode"] == "IMPORT_PAYLOAD_ERROR"

    def test_import_and_export(self, client: TestClient) -> None:
        payload = {
            "journals": [
                {
                    "date": "2026-04-05",
                    "description": "가져온 분개",
                    "details": [
                        {"accountCode": "1102", "debitAmount": "500"},
                        {"accountCode": "5101", "creditAmount": "500"},
                    ],
                }
            ]
        }

        imported = client.post("/api/data/import", json=payload).json()
        exported = client.get("/api/data/export").json()

        assert imported["imported"] == 1
        assert exported["trialBalance"]["totalDebit"] == "500"

    def test_restore_invalid(self, client: TestClient) -> None:
        response = client.post("/api/data/restore", json={"accounts": "broken"})

        assert response.status_code == 400

    def test_snapshot_round_trip(self, client: TestClient) -> None:
        client.post("/api/journals", json=_journal_body(autoPost=True))
        snapshot = client.get("/api/data/snapshot").json()

        response = client.post("/api/data/restore", json=snapshot)

        assert response.json()["journals"] == 1

    def test_accounts_csv(self, client: TestClient) -> None:
        response = client.get("/api/data/accounts.csv")

        assert response.status_code == 200
        assert response.text.startswith("code,name,type")


