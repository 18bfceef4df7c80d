"""
Provisioning configuration — the schema behind dotstrap's config file.

Every default reproduces the fixed layout of the plain setup.sh bootstrap
script, so running without a config file behaves exactly like it:

    ~/.oh-my-zsh       framework marker
    ~/dotfiles         cloned repository
    ~/.zshrc_common    symlink into the repository
    ~/.zshrc_local     machine-local overrides
    ~/.zshrc           pre-flight guard
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

OMZ_INSTALLER_URL = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
DOTFILES_SSH_URL = "git@github.com:golergka/dotfiles.git"
DOTFILES_HTTPS_URL = "https://github.com/golergka/dotfiles.git"


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")


class FrameworkSpec(_Strict):
    """The shell-configuration framework and its remote installer."""

    name: str = "Oh My Zsh"
    marker_dir: str = "~/.oh-my-zsh"
    installer_url: str = OMZ_INSTALLER_URL
    installer_args: list[str] = Field(default_factory=lambda: ["--unattended"])


class RepoLocation(_Strict):
    """Where the dotfiles come from and where they land."""

    primary_url: str = DOTFILES_SSH_URL
    fallback_url: str | None = DOTFILES_HTTPS_URL
    target: str = "~/dotfiles"

    def urls(self) -> list[tuple[str, str]]:
        """(transport label, url) pairs in the order they are tried."""
        pairs = [("primary", self.primary_url)]
        if self.fallback_url:
            pairs.append(("fallback", self.fallback_url))
        return pairs


class LinkSpec(_Strict):
    """A symlink from ``dest`` to ``source`` (source relative to the repo)."""

    source: str
    dest: str


class LocalOverrideSpec(_Strict):
    path: str = "~/.zshrc_local"
    seed: str = "# Machine-specific zsh configuration"


class Policies(_Strict):
    """Behaviour switches for the points where the older bootstrap scripts disagreed."""

    framework_failure: Literal["fatal", "warn"] = "fatal"
    shell_change_failure: Literal["fatal", "warn"] = "warn"
    existing_repo: Literal["keep", "pull"] = "keep"
    guard_existing_rc: bool = True
    chsh_with_sudo: bool = True


class ProvisionConfig(_Strict):
    """Root configuration model."""

    shell: str = "zsh"
    required_tools: list[str] = Field(default_factory=lambda: ["git", "curl"])
    rc_file: str = "~/.zshrc"

    framework: FrameworkSpec = Field(default_factory=FrameworkSpec)
    repository: RepoLocation = Field(default_factory=RepoLocation)
    links: list[LinkSpec] = Field(
        default_factory=lambda: [LinkSpec(source=".zshrc_common", dest="~/.zshrc_common")]
    )
    local_override: LocalOverrideSpec = Field(default_factory=LocalOverrideSpec)
    policies: Policies = Field(default_factory=Policies)

    command_timeout: int = Field(default=900, gt=0)
