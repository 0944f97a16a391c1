"""Batch orchestration: runs actions across wallets, one pair at a time."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from ..chains.sui import SuiClient, SuiCliExecutor
from ..config import AppConfig
from ..errors import CreekBotError, ExternalCallFailure
from ..interfaces.chain import ChainClient
from ..interfaces.executor import TransactionExecutor
from ..interfaces.registration import RegistrationApi
from ..models import ActionResult, ActionStatus, AmountConfig, BatchReport
from ..protocols.creek import CreekAdapter, CreekApiClient
from ..protocols.creek.actions import ActionKind, ActionSpec, get_action
from ..wallet import Wallet

logger = logging.getLogger(__name__)


def short_digest(digest: str) -> str:
    if not digest or len(digest) < 10:
        return digest
    return f"{digest[:4]}...{digest[-4:]}"


class BatchRunner:
    """Compose, submit and classify actions for a list of wallets.

    Every (wallet, action) pair is independent: a failure is recorded and
    the batch moves on. Nothing is retried.
    """

    def __init__(
        self,
        config: AppConfig,
        chain_client: ChainClient | None = None,
        executor: TransactionExecutor | None = None,
        api: RegistrationApi | None = None,
    ) -> None:
        self._config = config
        if chain_client is None:
            sui_client = SuiClient(config.chain)
            chain_client = sui_client
            executor = executor or SuiCliExecutor(sui_client, config.chain)
        if executor is None:
            raise ValueError("An executor is required with a custom chain client")

        self._client = chain_client
        self._executor = executor
        self._api = api or CreekApiClient(config.api)
        self._adapter = CreekAdapter(chain_client, config)

    # ------------------------------------------------------------------
    # Outcome logging
    # ------------------------------------------------------------------

    @staticmethod
    def _log_success(wallet: Wallet, spec: ActionSpec, digest: str) -> None:
        suffix = f": {short_digest(digest)}" if spec.kind is not ActionKind.CONNECT else ""
        logger.info("✔ [%s] %s success%s", wallet.short_address, spec.name, suffix)

    @staticmethod
    def _log_skip(wallet: Wallet, spec: ActionSpec, reason: str) -> None:
        logger.warning("⚠ [%s] %s: Skipping, %s", wallet.short_address, spec.name, reason)

    @staticmethod
    def _log_failure(wallet: Wallet, spec: ActionSpec, message: str) -> None:
        logger.error("✖ [%s] %s failed: %s", wallet.short_address, spec.name, message)

    # ------------------------------------------------------------------
    # Single (wallet, action) pair
    # ------------------------------------------------------------------

    async def _connect(self, wallet: Wallet, spec: ActionSpec) -> ActionResult:
        data = await self._api.connect(wallet.address)
        self._log_success(wallet, spec, "")
        return ActionResult(
            spec.key, wallet.address, ActionStatus.SUCCESS, detail=str(data.get("msg") or "OK")
        )

    async def _execute(
        self, wallet: Wallet, spec: ActionSpec, amount_config: AmountConfig | None
    ) -> ActionResult:
        prepared = await self._adapter.prepare(wallet.address, spec, amount_config)
        for warning in prepared.warnings:
            logger.warning("[%s] %s: %s", wallet.short_address, spec.name, warning)

        if prepared.skipped:
            self._log_skip(wallet, spec, prepared.skip_reason)
            return ActionResult(
                spec.key, wallet.address, ActionStatus.SKIPPED, detail=prepared.skip_reason
            )

        result = await self._executor.execute(wallet, prepared.transaction)
        if not result.success:
            error = result.error or "Transaction failed"
            self._log_failure(wallet, spec, error)
            return ActionResult(
                spec.key,
                wallet.address,
                ActionStatus.FAILED,
                digest=result.digest,
                detail=error,
                amount=prepared.amount,
            )

        self._log_success(wallet, spec, result.digest)
        return ActionResult(
            spec.key,
            wallet.address,
            ActionStatus.SUCCESS,
            digest=result.digest,
            amount=prepared.amount,
        )

    async def run_action(
        self, wallet: Wallet, action_key: str, amount_config: AmountConfig | None = None
    ) -> ActionResult:
        """Run one action for one wallet; never raises for action failures."""
        spec = get_action(action_key)
        try:
            if spec.kind is ActionKind.CONNECT:
                return await self._connect(wallet, spec)
            return await self._execute(wallet, spec, amount_config)
        except ExternalCallFailure as e:
            self._log_failure(wallet, spec, e.message)
            if e.detail != e.message:
                logger.debug("[%s] %s detail: %s", wallet.short_address, spec.name, e.detail)
            return ActionResult(spec.key, wallet.address, ActionStatus.FAILED, detail=e.detail)
        except CreekBotError as e:
            self._log_failure(wallet, spec, e.message)
            return ActionResult(spec.key, wallet.address, ActionStatus.FAILED, detail=e.message)
        except Exception as e:
            logger.exception("[%s] %s raised unexpectedly", wallet.short_address, spec.name)
            return ActionResult(spec.key, wallet.address, ActionStatus.FAILED, detail=str(e))

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def run_single(
        self,
        wallets: Sequence[Wallet],
        action_key: str,
        amount_config: AmountConfig | None = None,
    ) -> BatchReport:
        """Run one action across every wallet."""
        spec = get_action(action_key)
        logger.info("--- Running %s for %d wallets ---", spec.name, len(wallets))

        results: list[ActionResult] = []
        for index, wallet in enumerate(wallets, start=1):
            logger.info("[%d/%d] %s - %s", index, len(wallets), wallet.short_address, spec.name)
            results.append(await self.run_action(wallet, action_key, amount_config))

        report = BatchReport(tuple(results))
        self._log_summary(spec.name, report)
        return report

    async def run_batch(
        self,
        wallets: Sequence[Wallet],
        action_keys: Sequence[str],
        amount_configs: dict[str, AmountConfig] | None = None,
    ) -> BatchReport:
        """Run a sequence of actions for each wallet in turn.

        Successive actions for the same wallet are separated by the configured
        delay; there is no delay between wallets.
        """
        for key in action_keys:
            get_action(key)
        amount_configs = amount_configs or {}
        delay = self._config.batch.action_delay_seconds

        results: list[ActionResult] = []
        for index, wallet in enumerate(wallets, start=1):
            logger.info(
                "--- Processing Wallet %d/%d (%s) ---", index, len(wallets), wallet.address
            )
            for position, action_key in enumerate(action_keys):
                if position > 0 and delay > 0:
                    await asyncio.sleep(delay)
                results.append(
                    await self.run_action(wallet, action_key, amount_configs.get(action_key))
                )

        report = BatchReport(tuple(results))
        self._log_summary("RUN ALL", report)
        return report

    @staticmethod
    def _log_summary(name: str, report: BatchReport) -> None:
        logger.info(
            "--- %s complete: %d succeeded, %d skipped, %d failed ---",
            name,
            report.succeeded,
            report.skipped,
            report.failed,
        )
