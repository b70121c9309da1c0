"""
Configuration management for MCP4Git.

This module handles environment variables, API configuration,
and other settings for the server and the chat client.
"""

import os
import logging
import shutil
from dotenv import load_dotenv
from rich.console import Console
from rich.prompt import Prompt
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(), logging.FileHandler("mcp4git.log")],
)

logger = logging.getLogger(__name__)
console = Console()

DEFAULT_LLM_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class Config:
    """Configuration class for the MCP4Git server and chat client."""

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()
        # Only run interactive setup if not in testing/CI environment
        if not self._is_testing_environment():
            self._ensure_env_setup()

    def _is_testing_environment(self) -> bool:
        """Check if we're running in a testing environment."""
        return (
            os.getenv("PYTEST_CURRENT_TEST") is not None or
            os.getenv("CI") is not None or
            os.getenv("GITHUB_ACTIONS") is not None or
            "pytest" in sys.modules
        )

    @property
    def github_token(self) -> str:
        """Get GitHub token from environment."""
        return os.getenv("GITHUB_TOKEN", "")

    @property
    def github_username(self) -> str:
        """Get GitHub username from environment. Used as the default repository owner."""
        return os.getenv("GITHUB_USERNAME", "")

    @property
    def gemini_api_key(self) -> str:
        """Get the language model API key from environment."""
        return os.getenv("GEMINI_API_KEY", "")

    @property
    def default_branch(self) -> str:
        """Get the branch used when a tool call omits one."""
        return os.getenv("DEFAULT_BRANCH", "main")

    @property
    def model_name(self) -> str:
        """Get AI model name from environment or use default."""
        return os.getenv("MODEL_NAME", "gemini-2.0-flash")

    @property
    def llm_base_url(self) -> str:
        """Get the OpenAI-compatible language model base URL."""
        return os.getenv("LLM_BASE_URL", DEFAULT_LLM_BASE_URL)

    @property
    def github_api_base_url(self) -> str:
        """Get GitHub API base URL from environment or use default."""
        return os.getenv("GITHUB_API_BASE_URL", "https://api.github.com")

    @property
    def github_api_version(self) -> str:
        """Get GitHub API version."""
        return os.getenv("GITHUB_API_VERSION", "2022-11-28")

    @property
    def log_level(self) -> str:
        """Get log level from environment or use default."""
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def api_timeout(self) -> int:
        """Get timeout in seconds for GitHub API calls and MCP requests (not AI requests)."""
        return int(os.getenv("API_TIMEOUT", "30"))

    @property
    def server_host(self) -> str:
        """Get the interface the MCP server binds to."""
        return os.getenv("SERVER_HOST", "127.0.0.1")

    @property
    def server_port(self) -> int:
        """Get the port the MCP server listens on."""
        return int(os.getenv("SERVER_PORT", "3001"))

    @property
    def mcp_server_url(self) -> str:
        """Get the base URL the chat client connects to."""
        return os.getenv("MCP_SERVER_URL", f"http://{self.server_host}:{self.server_port}")

    @property
    def sse_keepalive_seconds(self) -> float:
        """Get the interval between keep-alive comments on idle SSE streams."""
        return float(os.getenv("SSE_KEEPALIVE_SECONDS", "15"))

    def _ensure_env_setup(self) -> None:
        """Ensure environment variables are set up, prompt user if missing."""
        if not os.path.exists(".env"):
            if os.path.exists(".env.example"):
                console.print("🔧 No .env file found, but .env.example exists.", style="yellow")
                if (
                    Prompt.ask(
                        "Would you like to copy .env.example to .env?",
                        choices=["y", "n"],
                        default="y",
                    )
                    == "y"
                ):
                    shutil.copy(".env.example", ".env")
                    console.print("✅ Created .env file from .env.example", style="green")
                    console.print(
                        "📝 Please edit .env with your actual API keys and run again.",
                        style="yellow",
                    )
                    return
            else:
                console.print(
                    "⚠️  No .env file found and no .env.example to copy from.", style="yellow"
                )
                if (
                    Prompt.ask(
                        "Would you like to create a .env file now?", choices=["y", "n"], default="y"
                    )
                    == "y"
                ):
                    self._create_env_file()
                else:
                    return

        # Reload environment variables after potential .env creation
        load_dotenv(override=True)

        self._validate_required_vars()

    def _create_env_file(self) -> None:
        """Create .env file by prompting user for values."""
        console.print("🔧 Creating .env file...", style="blue")

        console.print("\n📋 Required configuration:")
        github_token = Prompt.ask(
            "Enter your GitHub token (get from https://github.com/settings/tokens)", password=True
        )
        github_username = Prompt.ask("Enter your GitHub username (default repository owner)")
        gemini_key = Prompt.ask(
            "Enter your Gemini API key (get from https://aistudio.google.com/apikey)",
            password=True,
        )

        configure_optional = Prompt.ask(
            "\nWould you like to configure optional settings?", choices=["y", "n"], default="n"
        )

        model_name = self.model_name
        default_branch = self.default_branch
        log_level = self.log_level

        if configure_optional == "y":
            console.print("\n⚙️  Optional configuration:")
            model_name = Prompt.ask("AI model name", default=self.model_name)
            default_branch = Prompt.ask("Default branch", default=self.default_branch)
            log_level = Prompt.ask(
                "Log level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default=self.log_level
            )

        env_content = f"""# MCP4Git Environment Configuration
# Generated on setup

# Required: GitHub Personal Access Token
GITHUB_TOKEN={github_token}

# Required: Your GitHub username (used when a tool call omits the owner)
GITHUB_USERNAME={github_username}

# Required for the chat client: Gemini API key
GEMINI_API_KEY={gemini_key}

# Optional: Branch used when a tool call omits one
DEFAULT_BRANCH={default_branch}

# Optional: AI model name
MODEL_NAME={model_name}

# Optional: OpenAI-compatible language model endpoint
LLM_BASE_URL={self.llm_base_url}

# Optional: GitHub API base URL
GITHUB_API_BASE_URL={self.github_api_base_url}

# Optional: GitHub API version
GITHUB_API_VERSION={self.github_api_version}

# Optional: API timeout in seconds (GitHub and MCP requests, not AI requests)
API_TIMEOUT={self.api_timeout}

# Optional: MCP server address
SERVER_HOST={self.server_host}
SERVER_PORT={self.server_port}

# Optional: Log level
LOG_LEVEL={log_level}
"""

        with open(".env", "w") as f:
            f.write(env_content)

        console.print("✅ .env file created successfully!", style="green")
        console.print("🔐 Your API keys are now securely stored in .env", style="green")

    def _validate_required_vars(self) -> None:
        """Validate that all required environment variables are set."""
        required_vars = [
            ("GITHUB_TOKEN", self.github_token),
            ("GITHUB_USERNAME", self.github_username),
        ]

        missing_vars = [var_name for var_name, var_value in required_vars if not var_value]

        if missing_vars:
            console.print(
                f"❌ Missing required environment variables: {', '.join(missing_vars)}", style="red"
            )
            console.print(
                "💡 Please check your .env file and ensure all required values are set.",
                style="yellow",
            )
            console.print("📖 See .env.example for reference.", style="yellow")
            raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")

        if not self.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; the chat client will not be able to reach the model")

        logger.info("Configuration validated successfully")

    def get_github_headers(self) -> dict:
        """Get headers for GitHub API requests."""
        return {
            "Authorization": f"Bearer {self.github_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.github_api_version,
        }

    def setup_logging(self) -> None:
        """Setup logging configuration."""
        numeric_level = getattr(logging, self.log_level, None)
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {self.log_level}")

        logging.getLogger().setLevel(numeric_level)
        logger.info(f"Logging level set to {self.log_level}")


# Global configuration instance (lazy initialization)
_config_instance = None

def get_config() -> Config:
    """Get the global configuration instance (lazy initialization)."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance

class ConfigProxy:
    """Proxy object that provides lazy access to config properties."""
    def __getattr__(self, name):
        return getattr(get_config(), name)

config = ConfigProxy()
