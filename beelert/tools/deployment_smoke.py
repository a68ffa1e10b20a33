"""Deployment smoke checks for the BeeLert bot."""
from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Iterable, List, Mapping

from ..llm_client import API_KEY_ENV, DEFAULT_MODELS, MODEL_ENV, PROVIDER_GEMINI, PROVIDERS


@dataclass(frozen=True)
class CheckResult:
    name: str
    status: str
    detail: str


REQUIRED_ENV = ["BOT_TOKEN", "CHANNEL_ID"]


def _status(level: str, name: str, detail: str) -> CheckResult:
    return CheckResult(name=name, status=level, detail=detail)


def run_checks(env: Mapping[str, str]) -> List[CheckResult]:
    results: List[CheckResult] = []

    for key in REQUIRED_ENV:
        if env.get(key):
            results.append(_status("ok", key, "present"))
        else:
            results.append(_status("error", key, "missing"))

    provider = (env.get("BEELERT_AI_PROVIDER") or "").strip().lower() or PROVIDER_GEMINI
    if provider not in PROVIDERS:
        results.append(
            _status("error", "ai_provider", f"unknown provider {provider!r}; expected one of {', '.join(PROVIDERS)}")
        )
        return results

    model = env.get(MODEL_ENV[provider]) or DEFAULT_MODELS[provider]
    results.append(_status("ok", "ai_provider", f"{provider} ({model})"))

    key_env = API_KEY_ENV[provider]
    if (env.get(key_env) or "").strip():
        results.append(_status("ok", key_env, "present"))
    else:
        results.append(
            _status("warning", key_env, "missing; AI features will answer with fallback messages")
        )

    return results


def _print_table(results: Iterable[CheckResult]) -> None:
    header = f"{'Check':<32} {'Status':<8} Detail"
    print(header)
    print("-" * len(header))
    for result in results:
        print(f"{result.name:<32} {result.status:<8} {result.detail}")


def main(argv: Iterable[str] | None = None) -> int:  # pragma: no cover - CLI entry point
    parser = argparse.ArgumentParser(description="Run deployment smoke checks for BeeLert.")
    parser.parse_args(argv)
    results = run_checks(os.environ)
    _print_table(results)
    if any(result.status == "error" for result in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
