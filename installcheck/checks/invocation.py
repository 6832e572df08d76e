"""Stage 5: agent commands are well-formed and the runtime binary is probed.

Command checks are structural only; nothing is executed. The binary probe is
best effort and bounded by a timeout: an absent binary or a slow lookup
yields a warning, never a failure, since the validating host may not be the
host that eventually runs the agents.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import List, Sequence, Tuple

from installcheck.config.validator_config import ValidatorSettings
from installcheck.naming import canonical_agent_name
from installcheck.runtime.probe import EnvironmentProbe, ProbeOutcome
from installcheck.types import BinaryProbeCheck, InvocationKind, InvocationReadiness, InvocationTest

logger = logging.getLogger(__name__)

SAFE_COMMAND_RE = re.compile(r"^[A-Za-z0-9\s\-_./]+$")
BINARY_CHECK_NAME = "Runtime CLI availability"


def command_problems(command: str, required_prefix: str, max_length: int) -> List[str]:
    """Structural problems with ``command``; empty means valid."""
    problems: List[str] = []
    if re.search(r"\s{2,}", command):
        problems.append("contains doubled whitespace")
    if not SAFE_COMMAND_RE.match(command):
        problems.append("contains characters outside the safe set")
    if len(command) >= max_length:
        problems.append(f"is {len(command)} characters (limit {max_length})")
    if not command.startswith(required_prefix):
        problems.append(f"does not start with '{required_prefix}'")
    return problems


def synthesize_commands(agent_id: str, settings: ValidatorSettings) -> Tuple[InvocationTest, ...]:
    """Build and check the initial-invocation and agent-switch commands."""
    name = canonical_agent_name(agent_id, settings.prefix)
    specs = (
        (InvocationKind.INITIAL_INVOCATION, f"{settings.chat_command} {name}", settings.chat_prefix),
        (InvocationKind.AGENT_SWITCH, f"{settings.switch_command} {name}", settings.switch_marker),
    )
    tests = []
    for kind, command, prefix in specs:
        problems = command_problems(command, prefix, settings.max_command_length)
        tests.append(
            InvocationTest(
                agent_id=agent_id,
                command=command,
                kind=kind,
                valid=not problems,
                problems=tuple(problems),
            )
        )
    return tuple(tests)


def probe_runtime_binary(probe: EnvironmentProbe, binary: str, timeout: float) -> BinaryProbeCheck:
    """Ask ``probe`` for ``binary`` without waiting longer than ``timeout``."""
    pool = ThreadPoolExecutor(max_workers=1)
    try:
        future = pool.submit(probe.find_binary, binary, timeout)
        outcome = future.result(timeout=timeout)
    except FutureTimeoutError:
        logger.debug("Probe %s did not answer within %ss", probe.probe_id, timeout)
        outcome = ProbeOutcome(
            available=False,
            detail=f"lookup of '{binary}' timed out after {timeout}s",
        )
    except Exception as e:
        logger.debug("Probe %s raised: %s", probe.probe_id, e)
        outcome = ProbeOutcome(available=False, detail=f"lookup of '{binary}' failed: {e}")
    finally:
        pool.shutdown(wait=False)

    if outcome.available:
        return BinaryProbeCheck(check_name=BINARY_CHECK_NAME, success=True, detail=outcome.detail)
    return BinaryProbeCheck(
        check_name=BINARY_CHECK_NAME,
        success=False,
        detail=outcome.detail,
        warning=f"'{binary}' CLI not found in PATH - users will need to install it",
    )


def check_invocation_readiness(
    agent_ids: Sequence[str],
    probe: EnvironmentProbe,
    settings: ValidatorSettings,
) -> InvocationReadiness:
    """Check commands for every agent plus one host binary probe."""
    logger.info("Validating agent invocation readiness...")
    commands = tuple(test for agent_id in agent_ids for test in synthesize_commands(agent_id, settings))
    binary = probe_runtime_binary(probe, settings.runtime_binary, settings.probe_timeout)

    passed = sum(1 for t in commands if t.valid) + (1 if binary.success else 0)
    logger.info("Agent invocation readiness: %d/%d checks passed", passed, len(commands) + 1)
    return InvocationReadiness(commands=commands, binary=binary)
