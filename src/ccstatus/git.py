import asyncio
import subprocess

import structlog

from ccstatus.models import EMPTY_GIT_STATUS, DiffStats, GitStatus

logger = structlog.get_logger()

# seconds to wait for a killed git process to exit
_REAP_TIMEOUT = 1.0


def _to_int(value: "str") -> "int":
    try:
        return int(value)
    except ValueError:
        return 0


def parse_numstat(output: "str") -> "tuple[int, int]":
    """
    sums the added/deleted columns of `git diff --numstat` output.
    Binary files report '-' and count as zero.
    """
    added = 0
    deleted = 0
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("\t")
        added += _to_int(fields[0])
        if len(fields) > 1:
            deleted += _to_int(fields[1])
    return added, deleted


def count_files(output: "str") -> "int":
    return sum(1 for line in output.splitlines() if line.strip())


class GitStatusCollector:
    """
    GitStatusCollector queries the git CLI for the branch and the
    staged/unstaged diff size of a working directory. Any failure
    yields the empty status; callers bound the total time.
    """

    def __init__(self, cwd: "str | None" = None, executable: "str" = "git") -> "None":
        self._cwd = cwd or None
        self._git = executable

    async def _run(self, *args: "str") -> "tuple[int, str]":
        proc = await asyncio.create_subprocess_exec(
            self._git,
            *args,
            cwd=self._cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
        )
        try:
            stdout, _ = await proc.communicate()
        except asyncio.CancelledError:
            # the deadline expired, don't leave git running behind us
            if proc.returncode is None:
                proc.kill()
            # reap it so the subprocess transport is closed before the loop ends
            try:
                await asyncio.wait_for(proc.wait(), timeout=_REAP_TIMEOUT)
            except TimeoutError:
                logger.debug("git_reap_timeout", pid=proc.pid)
            raise
        return proc.returncode or 0, stdout.decode("utf-8", errors="replace")

    async def _text(self, *args: "str") -> "str":
        _, output = await self._run(*args)
        return output

    async def collect(self) -> "GitStatus":
        try:
            return await self._collect()
        except OSError:
            logger.debug("git_unavailable", cwd=self._cwd)
            return EMPTY_GIT_STATUS

    async def _collect(self) -> "GitStatus":
        code, _ = await self._run("rev-parse", "--git-dir")
        if code != 0:
            return EMPTY_GIT_STATUS

        branch = (await self._text("branch", "--show-current")).strip() or "detached"

        (unstaged_code, _), (staged_code, _) = await asyncio.gather(
            self._run("diff-index", "--quiet", "HEAD", "--"),
            self._run("diff-index", "--quiet", "--cached", "HEAD", "--"),
        )
        if unstaged_code == 0 and staged_code == 0:
            return GitStatus(branch=branch)

        staged_diff, unstaged_diff, staged_files, unstaged_files = (
            await asyncio.gather(
                self._text("diff", "--cached", "--numstat"),
                self._text("diff", "--numstat"),
                self._text("diff", "--cached", "--name-only"),
                self._text("diff", "--name-only"),
            )
        )

        staged_added, staged_deleted = parse_numstat(staged_diff)
        unstaged_added, unstaged_deleted = parse_numstat(unstaged_diff)
        return GitStatus(
            branch=branch,
            has_changes=True,
            staged=DiffStats(
                added=staged_added,
                deleted=staged_deleted,
                files=count_files(staged_files),
            ),
            unstaged=DiffStats(
                added=unstaged_added,
                deleted=unstaged_deleted,
                files=count_files(unstaged_files),
            ),
        )
