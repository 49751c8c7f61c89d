"""
.env file discovery for Country Info.

Provider keys and COUNTRY_INFO_* settings may live in a .env file instead of
the shell environment. The first file found in the search path is loaded;
variables already present in the environment are never overwritten.
"""

from pathlib import Path
from typing import Dict, List, Optional
import logging

from dotenv import dotenv_values, load_dotenv

logger = logging.getLogger(__name__)


class EnvFileLoader:
    """
    .env file loader with hierarchical search.

    Search order (stops at first file found):
    1. Current directory: .country-info/.env -> .env
    2. Parent directories (up to git root or home): .country-info/.env -> .env
    3. Home directory: ~/.country-info/.env -> ~/.env
    """

    CONFIG_DIR_NAME = ".country-info"
    ENV_FILE_NAME = ".env"

    def __init__(
        self,
        working_directory: Optional[Path] = None,
        home_directory: Optional[Path] = None
    ):
        self.working_directory = Path(working_directory or Path.cwd()).resolve()
        self.home_directory = Path(home_directory or Path.home()).resolve()
        self._loaded_file: Optional[Path] = None
        self._loaded_vars: Dict[str, str] = {}

    def load_env_file(self) -> Optional[Path]:
        """Load environment variables from the first .env file found.

        Returns:
            Path to loaded .env file or None if none found
        """
        env_file_path = self.find_env_file()
        if env_file_path is None:
            logger.debug("No .env file found in search path")
            return None

        load_dotenv(env_file_path, override=False)
        self._loaded_file = env_file_path
        self._loaded_vars = {
            key: value
            for key, value in dotenv_values(env_file_path).items()
            if value is not None
        }
        logger.debug(f"Loaded {len(self._loaded_vars)} variables from: {env_file_path}")
        return env_file_path

    def get_loaded_file(self) -> Optional[Path]:
        """Get path to the loaded .env file."""
        return self._loaded_file

    def get_loaded_vars(self) -> Dict[str, str]:
        """Get variables read from the loaded .env file."""
        return self._loaded_vars.copy()

    def find_env_file(self) -> Optional[Path]:
        """Find the first existing .env file in the search hierarchy."""
        for candidate in self.get_search_paths():
            if candidate.is_file():
                return candidate
        return None

    def get_search_paths(self) -> List[Path]:
        """Get list of all paths that would be searched for .env files, in order."""
        search_paths = []
        current_dir = self.working_directory

        while True:
            search_paths.append(current_dir / self.CONFIG_DIR_NAME / self.ENV_FILE_NAME)
            search_paths.append(current_dir / self.ENV_FILE_NAME)

            if self._should_stop_search(current_dir) or current_dir == current_dir.parent:
                break
            current_dir = current_dir.parent

        for home_path in (
            self.home_directory / self.CONFIG_DIR_NAME / self.ENV_FILE_NAME,
            self.home_directory / self.ENV_FILE_NAME,
        ):
            if home_path not in search_paths:
                search_paths.append(home_path)

        return search_paths

    def _should_stop_search(self, directory: Path) -> bool:
        """Stop at a git repository root or the home directory."""
        return (directory / ".git").exists() or directory == self.home_directory


def load_env_with_hierarchy(working_directory: Optional[Path] = None) -> Optional[Path]:
    """Convenience function to load .env file with hierarchical search.

    Args:
        working_directory: Starting directory for search

    Returns:
        Path to loaded .env file or None
    """
    loader = EnvFileLoader(working_directory)
    return loader.load_env_file()
