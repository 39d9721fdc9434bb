# scripts/install_browsers.py
import shutil
import subprocess
import sys

from runner.logger import log


def install_commands(browser: str = "chromium") -> list:
    commands = [[sys.executable, "-m", "playwright", "install", browser]]
    if shutil.which("npm"):
        # Warm the npx cache so the helper starts quickly on the first demo run
        commands.append(["npm", "exec", "--yes", "--", "@playwright/mcp", "--help"])
    else:
        log("WARN", "npm_missing", "npm not found; the Playwright MCP helper will not be available")
    return commands


def main(browser: str = "chromium") -> int:
    log("INFO", "setup_start", "Setting up Playwright MCP demo...")
    try:
        for command in install_commands(browser):
            log("INFO", "setup_step", "Running setup command", command=command)
            subprocess.run(command, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        log("ERROR", "setup_failed", "Setup failed", error=str(e))
        return 1

    log("INFO", "setup_done", "Setup completed successfully!")
    print("\nYou can now run the demos:")
    print("  python main.py simple      - Run the simple demo (recommended)")
    print("  python main.py basic       - Run the basic demo")
    print("  python main.py website     - Run the website interaction demo")
    print("  python main.py form        - Run the form filling demo")
    print("  python main.py hackernews  - Run the Hacker News crawler demo")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
