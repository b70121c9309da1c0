"""
Tool definitions and implementations for MCP4Git.

This module contains the GitHub operations exposed to MCP clients as tools.
Every function receives arguments already validated by the tool registry
and returns a ``ToolOutcome``; GitHub API errors are converted at this
boundary and never raised to the caller.
"""

import base64
import binascii
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .github_api import github_api
from .outcomes import (
    ErrorKind,
    PreflightCheck,
    ToolOutcome,
    classify_request_error,
    run_preflight,
)

logger = logging.getLogger(__name__)

GITHUB_WEB_URL = "https://github.com"
MAX_LIST_PAGES = 3
DEFAULT_PR_BODY = "Pull request created via GitHub tool"


def _contents_path(owner: str, repo: str, path: str) -> str:
    return f"/repos/{owner}/{repo}/contents/{quote(path.strip('/'), safe='/')}"


def _repo_exists(owner: str, repo: str) -> bool:
    github_api.make_request("GET", github_api.url(f"/repos/{owner}/{repo}"))
    return True


def _branch_exists(owner: str, repo: str, branch: str) -> bool:
    github_api.make_request("GET", github_api.url(f"/repos/{owner}/{repo}/git/ref/heads/{branch}"))
    return True


def _has_diff(owner: str, repo: str, base: str, head: str) -> bool:
    comparison = github_api.get_json(f"/repos/{owner}/{repo}/compare/{base}...{head}")
    return comparison.get("total_commits", 0) > 0


def _repo_check(owner: str, repo: str, prefix: str) -> PreflightCheck:
    return PreflightCheck(
        name="repository exists",
        predicate=lambda: _repo_exists(owner, repo),
        on_failure=ToolOutcome.failure(
            ErrorKind.NOT_FOUND,
            f"❌ {prefix}: Repository '{owner}/{repo}' not found or not accessible.\n"
            f"Please verify:\n"
            f"1. The repository name is correct (case-sensitive)\n"
            f"2. The repository exists\n"
            f"3. You have permission to access it",
        ),
    )


def _branch_check(owner: str, repo: str, branch: str, label: str, prefix: str) -> PreflightCheck:
    return PreflightCheck(
        name=f"{label.lower()} '{branch}' exists",
        predicate=lambda: _branch_exists(owner, repo, branch),
        on_failure=ToolOutcome.failure(
            ErrorKind.NOT_FOUND,
            f"❌ {prefix}: {label} '{branch}' not found in '{owner}/{repo}'.\n"
            f"Please verify:\n"
            f"1. The branch name is spelled correctly (case-sensitive)\n"
            f"2. The branch exists in the repository\n"
            f"3. You have permission to access this branch",
        ),
    )


def _format_repo(repo: Dict[str, Any], index: Optional[int] = None) -> str:
    heading = f"### **{index}. Repository:** " if index is not None else "**Repository:** "
    return (
        f"{heading}{repo.get('full_name')}  \n"
        f"**Description:** {repo.get('description') or 'No description'}  \n"
        f"**Stars:** {repo.get('stargazers_count', 0)}  \n"
        f"**Forks:** {repo.get('forks_count', 0)}  \n"
        f"**URL:** [{repo.get('html_url')}]({repo.get('html_url')})  "
    )


def _format_repo_list(repos: List[Dict[str, Any]]) -> str:
    return "\n\n---\n\n".join(_format_repo(repo, i) for i, repo in enumerate(repos, 1))


def fetch_repo(owner: str, repo: str) -> ToolOutcome:
    """
    Fetch metadata for a single repository.

    Args:
        owner: Repository owner
        repo: Repository name

    Returns:
        Markdown summary of the repository
    """
    logger.info(f"Fetching repository {owner}/{repo}")

    try:
        data = github_api.get_json(f"/repos/{owner}/{repo}")
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"fetching repository {owner}/{repo}", e)

    return ToolOutcome.success(
        f"**Repository:** {data.get('full_name')}  \n"
        f"**Description:** {data.get('description') or 'No description'}  \n"
        f"**Stars:** {data.get('stargazers_count', 0)}  \n"
        f"**Forks:** {data.get('forks_count', 0)}  \n"
        f"**Open Issues:** {data.get('open_issues_count', 0)}  \n"
        f"**Default Branch:** {data.get('default_branch')}  \n"
        f"**Language:** {data.get('language') or 'Unknown'}  \n"
        f"**URL:** [{data.get('html_url')}]({data.get('html_url')})  \n"
    )


def fetch_all_repos(username: str) -> ToolOutcome:
    """
    List public repositories of a user, most recently updated first.

    Args:
        username: GitHub login to list repositories for

    Returns:
        Markdown list of repositories
    """
    logger.info(f"Listing repositories for user: {username}")

    try:
        repos = github_api.get_paginated_results(
            github_api.url(f"/users/{username}/repos"),
            {"sort": "updated"},
            max_pages=MAX_LIST_PAGES,
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"fetching repositories for {username}", e)

    logger.info(f"Found {len(repos)} repositories")
    if not repos:
        return ToolOutcome.success(f"No repositories found for user: {username}")

    return ToolOutcome.success(f"**Repositories for {username}:**\n\n{_format_repo_list(repos)}")


def fetch_my_repos() -> ToolOutcome:
    """List all repositories of the authenticated user, public and private."""
    logger.info("Listing repositories for the authenticated user")

    try:
        user = github_api.get_json("/user")
        repos = github_api.get_paginated_results(
            github_api.url("/user/repos"),
            {"sort": "updated", "visibility": "all"},
            max_pages=MAX_LIST_PAGES,
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error("fetching your repositories", e)

    login = user.get("login")
    logger.info(f"Found {len(repos)} repositories for {login}")
    if not repos:
        return ToolOutcome.success(f"No repositories found for your account: {login}")

    return ToolOutcome.success(f"**Your repositories ({login}):**\n\n{_format_repo_list(repos)}")


def create_repo(name: str, description: str = "", is_private: bool = False) -> ToolOutcome:
    """
    Create a new repository for the authenticated user, initialized with a README.

    Args:
        name: Repository name
        description: Repository description
        is_private: Whether the repository should be private

    Returns:
        Summary with the repository URL and clone command
    """
    logger.info(f"Creating repository: {name} (private: {is_private})")

    try:
        response = github_api.make_request(
            "POST",
            github_api.url("/user/repos"),
            data={
                "name": name,
                "description": description,
                "private": is_private,
                "auto_init": True,
            },
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"creating repository '{name}'", e)

    repo = response.json()
    logger.info(f"Repository created successfully: {repo.get('html_url')}")
    return ToolOutcome.success(
        f"✅ **Repository created successfully!**\n\n"
        f"**Repository:** {repo.get('full_name')}  \n"
        f"**Description:** {repo.get('description') or 'No description'}  \n"
        f"**Visibility:** {'Private' if repo.get('private') else 'Public'}  \n"
        f"**URL:** [{repo.get('html_url')}]({repo.get('html_url')})  \n\n"
        f"```bash\ngit clone {repo.get('clone_url')}\n```\n"
    )


def search_repositories(
    query: str, sort: str = "stars", order: str = "desc", per_page: int = 10
) -> ToolOutcome:
    """
    Search public repositories.

    Args:
        query: GitHub search query, e.g. 'lang:rust stars:>1000'
        sort: stars, forks, help-wanted-issues or updated
        order: asc or desc
        per_page: Number of results (1-100)

    Returns:
        Markdown list of matching repositories
    """
    logger.info(f"Searching repositories for: {query}")

    try:
        result = github_api.get_json(
            "/search/repositories",
            params={"q": query, "sort": sort, "order": order, "per_page": per_page},
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"searching repositories for '{query}'", e)

    total = result.get("total_count", 0)
    items = result.get("items", [])
    logger.info(f"Search returned {total} results")

    if total == 0 or not items:
        return ToolOutcome.success(
            f"🔍 Found 0 repositories matching '{query}'.\n\n"
            f"Suggestions:\n"
            f"1. Use fewer or broader keywords\n"
            f"2. Check the spelling of qualifiers such as 'language:' or 'stars:'\n"
            f"3. Relax numeric filters (e.g. 'stars:>100' instead of 'stars:>1000')\n"
            f"4. Remove the language or topic restriction"
        )

    return ToolOutcome.success(
        f"🔍 **Found {total} repositories matching '{query}'** "
        f"(showing {len(items)}, sorted by {sort} {order}):\n\n{_format_repo_list(items)}"
    )


def create_pull_request(
    owner: str,
    repo: str,
    title: str,
    head: str,
    base: str,
    body: str = DEFAULT_PR_BODY,
) -> ToolOutcome:
    """
    Create a pull request after verifying repository, branches and diff.

    Args:
        owner: Repository owner
        repo: Repository name
        title: Pull request title
        head: Source branch
        base: Target branch
        body: Pull request description

    Returns:
        Summary with the URL of the created pull request
    """
    logger.info(f"Attempting to create pull request in {owner}/{repo} from {head} to {base}")

    prefix = "Unable to create pull request"
    checks = [
        _repo_check(owner, repo, prefix),
        _branch_check(owner, repo, head, "Source branch", prefix),
        _branch_check(owner, repo, base, "Target branch", prefix),
        PreflightCheck(
            name="branches differ",
            predicate=lambda: _has_diff(owner, repo, base, head),
            on_failure=ToolOutcome.failure(
                ErrorKind.PRECONDITION_FAILED,
                f"❌ Cannot create pull request: No differences found between '{base}' and '{head}'.\n\n"
                f"**Details:**\n"
                f"- **Repository:** {owner}/{repo}\n"
                f"- **Source branch:** {head}\n"
                f"- **Target branch:** {base}\n"
                f"- **Status:** No changes to merge\n\n"
                f"Please make sure:\n"
                f"1. You have committed changes to the source branch\n"
                f"2. The changes are not already merged\n"
                f"3. You're using the correct branch names",
            ),
            required=False,
        ),
    ]
    manual_hint = (
        f"You can try creating the pull request manually at:\n"
        f"{GITHUB_WEB_URL}/{owner}/{repo}/compare/{base}...{head}"
    )

    try:
        failure = run_preflight(checks)
        if failure is not None:
            return failure

        response = github_api.make_request(
            "POST",
            github_api.url(f"/repos/{owner}/{repo}/pulls"),
            data={"title": title, "body": body, "head": head, "base": base},
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error("creating pull request", e, hint=manual_hint)

    pr = response.json()
    logger.info(f"Pull request created successfully: {pr.get('html_url')}")
    return ToolOutcome.success(
        f"✅ **Pull request created successfully!**\n\n"
        f"🔗 **Pull Request URL:**  \n"
        f"[{pr.get('html_url')}]({pr.get('html_url')})\n\n"
        f"**Details:**  \n"
        f"- **Title:** {pr.get('title')}  \n"
        f"- **Number:** #{pr.get('number')}  \n"
        f"- **Status:** {pr.get('state')}  \n"
        f"- **From:** {head}  \n"
        f"- **To:** {base}  \n\n"
        f"**Description:**  \n"
        f"{pr.get('body') or 'No description provided'}\n"
    )


def create_branch(owner: str, repo: str, branch_name: str, source_branch: str) -> ToolOutcome:
    """
    Create a branch pointing at the head of another branch.

    Args:
        owner: Repository owner
        repo: Repository name
        branch_name: Name of the new branch
        source_branch: Branch to branch off from

    Returns:
        Summary of the created branch
    """
    logger.info(f"Creating branch {branch_name} from {source_branch} in {owner}/{repo}")

    try:
        try:
            source_ref = github_api.get_json(f"/repos/{owner}/{repo}/git/ref/heads/{source_branch}")
        except requests.exceptions.HTTPError as e:
            if classify_request_error(e) is not ErrorKind.NOT_FOUND:
                raise
            return ToolOutcome.failure(
                ErrorKind.NOT_FOUND,
                f"❌ Unable to create branch: Source branch '{source_branch}' not found "
                f"in '{owner}/{repo}' (or the repository is not accessible).",
            )

        response = github_api.make_request(
            "POST",
            github_api.url(f"/repos/{owner}/{repo}/git/refs"),
            data={"ref": f"refs/heads/{branch_name}", "sha": source_ref["object"]["sha"]},
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"creating branch '{branch_name}'", e)

    ref = response.json()
    branch_url = f"{GITHUB_WEB_URL}/{owner}/{repo}/tree/{branch_name}"
    return ToolOutcome.success(
        f"✅ **Branch created successfully!**\n\n"
        f"**Name:** {branch_name}  \n"
        f"**Created from:** {source_branch}  \n"
        f"**SHA:** {ref['object']['sha']}  \n"
        f"**URL:** [{branch_url}]({branch_url})  \n"
    )


def delete_branch(owner: str, repo: str, branch_name: str) -> ToolOutcome:
    """
    Delete a branch after verifying the repository and branch exist.

    Args:
        owner: Repository owner
        repo: Repository name
        branch_name: Branch to delete

    Returns:
        Confirmation message
    """
    logger.info(f"Attempting to delete branch '{branch_name}' from {owner}/{repo}")

    prefix = "Unable to delete branch"
    checks = [
        _repo_check(owner, repo, prefix),
        _branch_check(owner, repo, branch_name, "Branch", prefix),
    ]

    try:
        failure = run_preflight(checks)
        if failure is not None:
            return failure

        github_api.make_request(
            "DELETE", github_api.url(f"/repos/{owner}/{repo}/git/refs/heads/{branch_name}")
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(
            f"deleting branch '{branch_name}'",
            e,
            hint="Please check that the branch is not protected and is not the default branch.",
        )

    logger.info(f"Deleted branch {branch_name} from {owner}/{repo}")
    return ToolOutcome.success(
        f"✅ **Branch deleted successfully!**\n\n"
        f"**Repository:** {owner}/{repo}  \n"
        f"**Branch:** {branch_name}  \n\n"
        f"> _Note: This action cannot be undone. If you need to recover this branch, "
        f"you'll need to create it again._\n"
    )


def list_branches(owner: str, repo: str) -> ToolOutcome:
    """
    List the branches of a repository.

    Args:
        owner: Repository owner
        repo: Repository name

    Returns:
        Markdown list of branches
    """
    logger.info(f"Listing branches for {owner}/{repo}")

    try:
        failure = run_preflight([_repo_check(owner, repo, "Unable to list branches")])
        if failure is not None:
            return failure

        branches = github_api.get_paginated_results(
            github_api.url(f"/repos/{owner}/{repo}/branches"), max_pages=MAX_LIST_PAGES
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"listing branches of {owner}/{repo}", e)

    logger.info(f"Found {len(branches)} branches in {owner}/{repo}")
    if not branches:
        return ToolOutcome.success(
            f"No branches found in repository {owner}/{repo}. This might be a new repository."
        )

    branch_list = "\n\n".join(
        f"{i}. **Branch:** {branch['name']}  \n"
        f"**SHA:** {branch['commit']['sha']}  \n"
        f"**Protected:** {'Yes' if branch.get('protected') else 'No'}"
        for i, branch in enumerate(branches, 1)
    )
    return ToolOutcome.success(f"**Branches in {owner}/{repo}:**\n\n{branch_list}")


def create_or_update_file(
    owner: str,
    repo: str,
    path: str,
    content: str,
    message: str,
    branch: str,
    encoding: str = "utf-8",
) -> ToolOutcome:
    """
    Create a file, or update it when it already exists on the branch.

    The current blob SHA is looked up first; GitHub requires it for updates
    and rejects the write with 409 when the file changed in the meantime.

    Args:
        owner: Repository owner
        repo: Repository name
        path: File path relative to the repository root
        content: New file content
        message: Commit message
        branch: Branch to commit to
        encoding: 'utf-8' for plain text, 'base64' when content is already encoded

    Returns:
        Summary of the commit
    """
    logger.info(f"Writing {owner}/{repo}/{path} on branch {branch}")

    if encoding == "base64":
        try:
            base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError):
            return ToolOutcome.failure(
                ErrorKind.INVALID_ARGUMENTS,
                "❌ Error writing file: 'content' is not valid base64 but encoding is 'base64'.",
            )
        encoded_content = content
    else:
        encoded_content = base64.b64encode(content.encode(encoding)).decode("ascii")

    url = github_api.url(_contents_path(owner, repo, path))

    try:
        try:
            existing = github_api.make_request("GET", url, params={"ref": branch}).json()
        except requests.exceptions.HTTPError as e:
            if classify_request_error(e) is not ErrorKind.NOT_FOUND:
                raise
            existing = None

        if isinstance(existing, list):
            return ToolOutcome.failure(
                ErrorKind.PRECONDITION_FAILED,
                f"❌ Error writing file: '{path}' is a directory in {owner}/{repo}.",
            )

        data = {"message": message, "content": encoded_content, "branch": branch}
        if existing is not None:
            data["sha"] = existing["sha"]

        response = github_api.make_request("PUT", url, data=data)
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"writing file '{path}'", e)

    action = "updated" if existing is not None else "created"
    result = response.json()
    file_url = result.get("content", {}).get("html_url")
    commit = result.get("commit", {})
    logger.info(f"File {action}: {path} ({commit.get('sha')})")
    return ToolOutcome.success(
        f"✅ **File {action} successfully!**\n\n"
        f"**Repository:** {owner}/{repo}  \n"
        f"**Path:** {path}  \n"
        f"**Branch:** {branch}  \n"
        f"**Commit:** {commit.get('sha')}  \n"
        f"**Message:** {message}  \n"
        f"**URL:** [{file_url}]({file_url})  \n"
    )


def get_file_contents(owner: str, repo: str, path: str, ref: str) -> ToolOutcome:
    """
    Read a file, or list a directory, at a given ref.

    Args:
        owner: Repository owner
        repo: Repository name
        path: File or directory path
        ref: Branch, tag or commit SHA

    Returns:
        File content in a code block, or a directory listing
    """
    logger.info(f"Getting file content: {owner}/{repo}/{path} at {ref}")

    try:
        data = github_api.get_json(_contents_path(owner, repo, path), params={"ref": ref})
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"reading '{path}' at '{ref}'", e)

    if isinstance(data, list):
        if not data:
            return ToolOutcome.success(f"📁 Directory '{path}' in {owner}/{repo} ({ref}) is empty.")
        entries = "\n".join(
            f"- {'📁' if item.get('type') == 'dir' else '📄'} {item.get('path')}" for item in data
        )
        return ToolOutcome.success(f"📁 **Contents of '{path}' in {owner}/{repo} ({ref}):**\n\n{entries}")

    if data.get("type") != "file":
        return ToolOutcome.success(
            f"'{path}' in {owner}/{repo} is a {data.get('type')}, not a regular file."
        )

    content = data.get("content")
    if not content:
        if data.get("size", 0) > 0:
            return ToolOutcome.success(
                f"📄 '{path}' is too large to display through the contents API "
                f"({data.get('size'):,} bytes). Download it from {data.get('download_url')}"
            )
        return ToolOutcome.success(f"📄 '{path}' in {owner}/{repo} ({ref}) is empty.")

    try:
        decoded = base64.b64decode(content).decode("utf-8")
    except UnicodeDecodeError:
        return ToolOutcome.success(
            f"📄 '{path}' appears to be binary ({data.get('size', 0):,} bytes) and cannot be shown as text."
        )

    logger.info(f"Retrieved {len(decoded)} characters from {path}")
    return ToolOutcome.success(
        f"📄 **{path}** ({owner}/{repo} @ {ref}, sha {data.get('sha')})\n\n```\n{decoded}\n```"
    )


def list_commits(owner: str, repo: str, path: Optional[str] = None, per_page: int = 10) -> ToolOutcome:
    """
    List recent commits, optionally restricted to a path.

    Args:
        owner: Repository owner
        repo: Repository name
        path: Only commits touching this path
        per_page: Number of commits (1-100)

    Returns:
        Markdown list of commits
    """
    logger.info(f"Listing commits for {owner}/{repo} (path={path})")

    params: Dict[str, Any] = {"per_page": per_page}
    if path:
        params["path"] = path

    try:
        commits = github_api.get_json(f"/repos/{owner}/{repo}/commits", params=params)
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"listing commits of {owner}/{repo}", e)

    where = f" touching '{path}'" if path else ""
    if not commits:
        return ToolOutcome.success(f"No commits found in {owner}/{repo}{where}.")

    lines = []
    for i, commit in enumerate(commits, 1):
        details = commit.get("commit", {})
        author = details.get("author") or {}
        summary = (details.get("message") or "").split("\n", 1)[0]
        lines.append(
            f"{i}. `{commit['sha'][:7]}` {summary}  \n"
            f"   _{author.get('name', 'unknown')}, {author.get('date', '')}_"
        )

    return ToolOutcome.success(
        f"**Recent commits in {owner}/{repo}{where}:**\n\n" + "\n".join(lines)
    )


def list_issues(owner: str, repo: str, state: str = "open", per_page: int = 10) -> ToolOutcome:
    """
    List issues of a repository, excluding pull requests.

    Args:
        owner: Repository owner
        repo: Repository name
        state: open, closed or all
        per_page: Number of issues (1-100)

    Returns:
        Markdown list of issues
    """
    logger.info(f"Listing {state} issues for {owner}/{repo}")

    try:
        items = github_api.get_json(
            f"/repos/{owner}/{repo}/issues", params={"state": state, "per_page": per_page}
        )
    except requests.exceptions.RequestException as e:
        return ToolOutcome.from_request_error(f"listing issues of {owner}/{repo}", e)

    # The issues endpoint also returns pull requests
    issues = [item for item in items if "pull_request" not in item]
    if not issues:
        return ToolOutcome.success(f"No {state} issues found in {owner}/{repo}.")

    lines = []
    for issue in issues:
        labels = ", ".join(label["name"] for label in issue.get("labels", []))
        line = f"- **#{issue['number']}** [{issue['title']}]({issue.get('html_url')}) ({issue.get('state')})"
        if labels:
            line += f" `{labels}`"
        lines.append(line)

    return ToolOutcome.success(f"**{state.capitalize()} issues in {owner}/{repo}:**\n\n" + "\n".join(lines))


_OWNER = {"type": "string", "description": "Repository owner (defaults to the configured GitHub user)"}
_REPO = {"type": "string", "description": "Repository name without the owner, e.g. 'Hello-World'"}
_PER_PAGE = {
    "type": "integer",
    "description": "Number of results to return (1-100)",
    "default": 10,
    "minimum": 1,
    "maximum": 100,
}

# "config_defaults" names the ToolDefaults field used when an argument is omitted.
# "argument_names" maps wire parameter names onto Python keyword names.
TOOLS: List[Dict[str, Any]] = [
    {
        "name": "fetch_repo",
        "description": "Fetch GitHub repository information: description, stars, forks, open issues and URL.",
        "parameters": {
            "type": "object",
            "properties": {"owner": _OWNER, "repo": _REPO},
            "required": ["repo"],
        },
        "config_defaults": {"owner": "owner"},
    },
    {
        "name": "fetch_all_repos",
        "description": "Fetch all public GitHub repositories for a user.",
        "parameters": {
            "type": "object",
            "properties": {"username": {"type": "string", "description": "GitHub username"}},
            "required": ["username"],
        },
    },
    {
        "name": "fetch_my_repos",
        "description": "Fetch all repositories for the authenticated GitHub user, including private ones.",
        "parameters": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "create_repo",
        "description": "Create a new GitHub repository for the authenticated user, initialized with a README.",
        "parameters": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Repository name, e.g. 'my-awesome-project'"},
                "description": {"type": "string", "description": "Repository description", "default": ""},
                "isPrivate": {
                    "type": "boolean",
                    "description": "true for a private repository, false for public",
                    "default": False,
                },
            },
            "required": ["name"],
        },
        "argument_names": {"isPrivate": "is_private"},
    },
    {
        "name": "create_pull_request",
        "description": (
            "Create a new pull request on GitHub. Verifies the repository, both branches "
            "and that the branches differ before creating it."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "owner": _OWNER,
                "repo": _REPO,
                "title": {"type": "string", "description": "Pull request title"},
                "body": {"type": "string", "description": "Pull request description", "default": DEFAULT_PR_BODY},
                "head": {"type": "string", "description": "Source branch containing the changes"},
                "base": {"type": "string", "description": "Target branch to merge into"},
            },
            "required": ["repo", "title", "head"],
        },
        "config_defaults": {"owner": "owner", "base": "branch"},
    },
    {
        "name": "create_branch",
        "description": "Create a new branch in a GitHub repository from an existing branch.",
        "parameters": {
            "type": "object",
            "properties": {
                "owner": _OWNER,
                "repo": _REPO,
                "branchName": {"type": "string", "description": "Name of the new branch, e.g. 'feature/login'"},
                "sourceBranch": {"type": "string", "description": "Branch to create the new branch from"},
            },
            "required": ["repo", "branchName"],
        },
        "config_defaults": {"owner": "owner", "sourceBranch": "branch"},
        "argument_names": {"branchName": "branch_name", "sourceBranch": "source_branch"},
    },
    {
        "name": "delete_branch",
        "description": "Delete a branch from a GitHub repository. This cannot be undone.",
        "parameters": {
            "type": "object",
            "properties": {
                "owner": _OWNER,
                "repo": _REPO,
                "branchName": {"type": "string", "description": "Branch to delete"},
            },
            "required": ["repo", "branchName"],
        },
        "config_defaults": {"owner": "owner"},
        "argument_names": {"branchName": "branch_name"},
    },
    {
        "name": "list_branches",
        "description": "List all branches in a GitHub repository.",
        "parameters": {
            "type": "object",
            "properties": {"owner": _OWNER, "repo": _REPO},
            "required": ["repo"],
        },
        "config_defaults": {"owner": "owner"},
    },
    {
        "name": "create_or_update_file",
        "description": (
            "Create a file in a GitHub repository, or update it if it already exists on the branch. "
            "Commits directly to the branch."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "owner": _OWNER,
                "repo": _REPO,
                "path": {"type": "string", "description": "File path relative to the repository root, e.g. 'docs/intro.md'"},
                "content": {"type": "string", "description": "Full new content of the file"},
                "message": {"type": "string", "description": "Commit message"},
                "branch": {"type": "string", "description": "Branch to commit to"},
                "encoding": {
                    "type": "string",
                    "description": "'utf-8' for plain text content, 'base64' if content is already base64 encoded",
                    "enum": ["utf-8", "base64"],
                    "default": "utf-8",
                },
            },
            "required": ["repo", "path", "content", "message"],
        },
        "config_defaults": {"owner": "owner", "branch": "branch"},
    },
    {
        "name": "search_repositories",
        "description": "Search GitHub repositories using GitHub search syntax, e.g. 'lang:python stars:>500'.",
        "parameters": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "sort": {
                    "type": "string",
                    "description": "Sort field",
                    "enum": ["stars", "forks", "help-wanted-issues", "updated"],
                    "default": "stars",
                },
                "order": {
                    "type": "string",
                    "description": "Sort order",
                    "enum": ["asc", "desc"],
                    "default": "desc",
                },
                "per_page": _PER_PAGE,
            },
            "required": ["query"],
        },
    },
    {
        "name": "get_file_contents",
        "description": "Get the contents of a file, or the listing of a directory, in a GitHub repository.",
        "parameters": {
            "type": "object",
            "properties": {
                "owner": _OWNER,
                "repo": _REPO,
                "path": {"type": "string", "description": "File or directory path, e.g. 'README.md'"},
                "ref": {"type": "string", "description": "Branch, tag or commit SHA"},
            },
            "required": ["repo", "path"],
        },
        "config_defaults": {"owner": "owner", "ref": "branch"},
    },
    {
        "name": "list_commits",
        "description": "List recent commits of a GitHub repository, optionally only those touching a path.",
        "parameters": {
            "type": "object",
            "properties": {
                "owner": _OWNER,
                "repo": _REPO,
                "path": {"type": "string", "description": "Only commits containing this file path"},
                "per_page": _PER_PAGE,
            },
            "required": ["repo"],
        },
        "config_defaults": {"owner": "owner"},
    },
    {
        "name": "list_issues",
        "description": "List issues in a GitHub repository (pull requests are excluded).",
        "parameters": {
            "type": "object",
            "properties": {
                "owner": _OWNER,
                "repo": _REPO,
                "state": {
                    "type": "string",
                    "description": "Issue state",
                    "enum": ["open", "closed", "all"],
                    "default": "open",
                },
                "per_page": _PER_PAGE,
            },
            "required": ["repo"],
        },
        "config_defaults": {"owner": "owner"},
    },
]


# Tool function mapping
TOOL_FUNCTIONS = {
    "fetch_repo": fetch_repo,
    "fetch_all_repos": fetch_all_repos,
    "fetch_my_repos": fetch_my_repos,
    "create_repo": create_repo,
    "create_pull_request": create_pull_request,
    "create_branch": create_branch,
    "delete_branch": delete_branch,
    "list_branches": list_branches,
    "create_or_update_file": create_or_update_file,
    "search_repositories": search_repositories,
    "get_file_contents": get_file_contents,
    "list_commits": list_commits,
    "list_issues": list_issues,
}
