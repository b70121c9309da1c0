"""
Static MCP resources and prompts served by MCP4Git.
"""

import json
from typing import Any, Dict, List, Optional

PULL_REQUEST_TEMPLATES = {
    "feature": (
        "## Feature Pull Request\n\n"
        "**Description**\n[Describe the feature you're adding]\n\n"
        "**Changes Made**\n- [List major changes]\n\n"
        "**Testing**\n- [ ] Unit tests added\n- [ ] Integration tests added\n- [ ] Manual testing completed"
    ),
    "bugfix": (
        "## Bug Fix Pull Request\n\n"
        "**Issue**\n[Describe the bug you're fixing]\n\n"
        "**Solution**\n[Explain your solution]\n\n"
        "**Testing**\n- [ ] Regression tests added\n- [ ] Bug fix verified"
    ),
    "documentation": (
        "## Documentation Update\n\n"
        "**Changes**\n[Describe documentation changes]\n\n"
        "**Verification**\n- [ ] Documentation reviewed\n- [ ] Links verified"
    ),
}

BRANCH_NAMING = {
    "feature": "feature/",
    "bugfix": "bugfix/",
    "hotfix": "hotfix/",
    "release": "release/",
}

RESOURCES: Dict[str, Dict[str, Any]] = {
    "github://templates/pull-request": {
        "name": "pull_request_templates",
        "description": "Pull request description templates for features, bug fixes and documentation",
        "mimeType": "application/json",
        "data": PULL_REQUEST_TEMPLATES,
    },
    "github://templates/branch-naming": {
        "name": "branch_naming",
        "description": "Branch name prefixes by kind of change",
        "mimeType": "application/json",
        "data": BRANCH_NAMING,
    },
}

ASSISTANT_PROMPT = """👋 Welcome to the GitHub Assistant!

I can help you manage your GitHub repositories with these simple commands:

📁 Repository Management:
- "Show repository details" - View info about any repository
- "List my repositories" - See all your repositories
- "Search repositories" - Find repositories, e.g. "rust projects with more than 1000 stars"
- "Create new repository"
  Example: "Create a repository named 'my-project' with description 'My awesome project'"

🌿 Branch Operations:
- "Create branch" - Example: "Create branch 'feature/login' in 'my-project'"
- "List branches" - Example: "Show all branches in 'my-project'"
- "Delete branch" - Example: "Delete branch 'old-feature' from 'my-project'"

🔄 Pull Requests:
- "Create pull request"
  Example: "Create PR from 'feature' to 'main' in 'my-project' titled 'Add new feature'"

📄 Files, Commits and Issues:
- "Show README.md in 'my-project'"
- "Add a CONTRIBUTING.md file to 'my-project'"
- "List recent commits in 'my-project'"
- "List open issues in 'my-project'"

✨ Features:
- Default owner is '{owner}' and default branch is '{branch}' (no need to specify)
- Clear success/error messages
- Direct links to GitHub for all operations

📚 Resources Available:
- PR Templates (feature, bugfix, documentation)
- Branch naming conventions

How can I assist you with your GitHub tasks today?"""

PROMPTS: Dict[str, Dict[str, Any]] = {
    "github_assistant": {
        "description": "Introduction to the GitHub assistant and the operations it supports",
        "arguments": [],
    },
}

SYSTEM_INSTRUCTION = """You are a helpful AI assistant with access to GitHub tools through MCP (Model Context Protocol). Your primary role is to help users interact with these tools in a user-friendly way.

## Response Formatting Guidelines

When you receive data from any tool, format it in a clean, organized manner:
1. Present information clearly with proper structure and formatting
2. Use lists for multiple items, tables for structured data and code blocks for technical information
3. Add context and explanations to help users understand the data
4. Provide actionable suggestions for next steps

### For GitHub Repository Data:
- Present each repository with name, description, stars and forks
- Add summary counts and mention the actions available
- Keep URLs as clickable markdown links

### General Communication Style:
- Be conversational and helpful, concise but informative
- Never return raw, unformatted data
- Explain what the user can do next

## Tool Usage
- Call a tool whenever the user asks for GitHub data or a GitHub change
- Omit 'owner' to use the configured account and omit branch names to use the default branch
- Repository names are given without the owner, e.g. 'my-project'"""


def list_resources() -> List[Dict[str, Any]]:
    return [
        {
            "uri": uri,
            "name": resource["name"],
            "description": resource["description"],
            "mimeType": resource["mimeType"],
        }
        for uri, resource in RESOURCES.items()
    ]


def read_resource(uri: str) -> Optional[Dict[str, Any]]:
    """Return the MCP contents payload for a resource URI, or None if unknown."""
    resource = RESOURCES.get(uri)
    if resource is None:
        return None
    return {
        "contents": [
            {
                "uri": uri,
                "mimeType": resource["mimeType"],
                "text": json.dumps(resource["data"], indent=2),
            }
        ]
    }


def list_prompts() -> List[Dict[str, Any]]:
    return [{"name": name, **prompt} for name, prompt in PROMPTS.items()]


def get_prompt(name: str, owner: str, branch: str) -> Optional[Dict[str, Any]]:
    """Render a prompt by name, or None if unknown."""
    if name not in PROMPTS:
        return None
    return {
        "description": PROMPTS[name]["description"],
        "messages": [
            {
                "role": "assistant",
                "content": {
                    "type": "text",
                    "text": ASSISTANT_PROMPT.format(owner=owner, branch=branch),
                },
            }
        ],
    }
