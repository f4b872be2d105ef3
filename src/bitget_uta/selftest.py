#!/usr/bin/env python3
"""
Bitget UTA Self-Test
========================================
3-step probe that pinpoints where connectivity or authentication breaks.
"""

import logging
from collections import deque
from typing import Any, Callable, Dict, List, Optional

from bitget_uta.rest.client import UTAClient
from bitget_uta.rest.errors import APIError, TransportError, UTAError, ValidationError
from bitget_uta.services.constants import Category

logger = logging.getLogger(__name__)

PROBE_SYMBOL = "BTCUSDT"


class SelfTestResult:
    """Result of a single test step"""

    def __init__(self, step_name: str, endpoint: str):
        self.step_name = step_name
        self.endpoint = endpoint
        self.success = False
        self.http_status: Optional[int] = None
        self.api_code: Optional[str] = None
        self.api_msg: Optional[str] = None
        self.error_hint: Optional[str] = None
        self.details: Dict[str, Any] = {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for display"""
        return {
            "step": self.step_name,
            "endpoint": self.endpoint,
            "success": self.success,
            "http_status": self.http_status,
            "api_code": self.api_code,
            "api_msg": self.api_msg,
            "error_hint": self.error_hint,
            "details": self.details,
        }


class UTASelfTest:
    """
    3-step self-test.

    Steps:
    1. Unsigned tickers → network connectivity and base URL
    2. Signed account settings → signing and authentication
    3. Signed account assets → read permission
    """

    def __init__(self, client: UTAClient):
        self.client = client
        self.results: List[SelfTestResult] = []

        # Error ring buffer (last 5 errors)
        self.error_history = deque(maxlen=5)

    def run_all_tests(self) -> List[SelfTestResult]:
        """
        Run the steps in order, stopping at the first failure.

        Returns:
            List of test results (only the steps that ran)
        """
        self.results = []

        logger.info("=" * 60)
        logger.info(" Bitget UTA Self-Test")
        logger.info("=" * 60)

        steps = (
            (self._test_tickers, "network/base_url issue"),
            (self._test_account_settings, "signing/authentication issue"),
            (self._test_account_assets, "permission issue"),
        )

        for index, (step, failure) in enumerate(steps, 1):
            result = step()
            self.results.append(result)
            if not result.success:
                logger.error(f"Step {index} ({result.step_name}) failed → {failure}")
                return self.results

        logger.info("=" * 60)
        logger.info("✅ All self-tests passed")
        return self.results

    @property
    def passed(self) -> bool:
        return bool(self.results) and all(r.success for r in self.results)

    def _run_step(
        self,
        result: SelfTestResult,
        call: Callable[[], Dict[str, Any]],
        network_hint: str,
    ) -> SelfTestResult:
        try:
            result.details = call()
            result.success = True
            result.http_status = 200
            logger.info(f"{result.step_name}: ✅ OK")

        except APIError as e:
            result.api_code = e.code
            result.api_msg = e.message
            result.error_hint = e.get_diagnosis()
            logger.error(f"{result.step_name}: ❌ {e.code} - {e.message}")
            logger.error(f"  Hint: {result.error_hint}")

        except TransportError as e:
            result.http_status = e.status_code
            result.error_hint = network_hint
            result.details = {"error": str(e)}
            logger.error(f"{result.step_name}: ❌ {e}")

        except ValidationError as e:
            result.error_hint = "Credentials not configured (BITGET_API_KEY / BITGET_SECRET_KEY / BITGET_PASSPHRASE)"
            result.details = {"error": str(e)}
            logger.error(f"{result.step_name}: ❌ {e}")

        except UTAError as e:
            result.error_hint = "Unexpected response from exchange"
            result.details = {"error": str(e)}
            logger.error(f"{result.step_name}: ❌ {e}")

        if not result.success:
            self._record_error(result)
        return result

    def _test_tickers(self) -> SelfTestResult:
        """Step 1: Unsigned market data"""
        service = self.client.service("tickers").category(Category.SPOT).symbol(PROBE_SYMBOL)
        result = SelfTestResult("1_tickers_unsigned", service.spec.path)

        def call() -> Dict[str, Any]:
            tickers = service.do()
            last = tickers[0].last_price if tickers else ""
            return {"message": "Network OK", "last_price": last}

        return self._run_step(result, call, "Network connectivity or base_url issue")

    def _test_account_settings(self) -> SelfTestResult:
        """Step 2: Signed account settings"""
        service = self.client.service("account_info")
        result = SelfTestResult("2_account_settings_signed", service.spec.path)

        def call() -> Dict[str, Any]:
            info = service.do()
            return {
                "message": "Authentication OK",
                "asset_mode": info.asset_mode,
                "holding_mode": info.holding_mode,
            }

        return self._run_step(result, call, "Signed request did not complete")

    def _test_account_assets(self) -> SelfTestResult:
        """Step 3: Signed account assets"""
        service = self.client.service("account_assets")
        result = SelfTestResult("3_account_assets_signed", service.spec.path)

        def call() -> Dict[str, Any]:
            assets = service.do()
            return {
                "message": "Full read access OK",
                "account_equity": assets.account_equity,
                "asset_count": len(assets.assets),
            }

        return self._run_step(result, call, "Signed request did not complete")

    def _record_error(self, result: SelfTestResult):
        """Record error in ring buffer"""
        self.error_history.append(
            {
                "step": result.step_name,
                "endpoint": result.endpoint,
                "http_status": result.http_status,
                "code": result.api_code,
                "msg": result.api_msg,
                "hint": result.error_hint,
            }
        )

    def get_error_history(self) -> List[Dict]:
        """Get last 5 errors"""
        return list(self.error_history)
