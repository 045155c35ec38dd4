"""
Configuration Examples for the Open API cash register SDK
Demonstrates various ways to configure and use the client
"""

from open_kkt import OpenClient
from open_kkt.config import (
    ConfigLoader,
    ConfigValidator,
    LogLevel,
    OpenApiConfig,
)
from open_kkt.models import CommandFilter


# =============================================================================
# Example 1: Programmatic Configuration
# =============================================================================

def programmatic_config_example() -> OpenApiConfig:
    """Configure SDK programmatically with all options"""
    loader = ConfigLoader()

    return loader.load(
        env=False,
        config={
            # Integration credentials from the account settings page
            "account": "https://check.business.ru/open-api/v1/",
            "app_id": "YOUR_APP_ID",
            "secret": "YOUR_SECRET_KEY",

            # Transport settings
            "timeout": 30000,

            # Token cache and daily log files
            "cache_path": "./cache",
            "log_path": "./logs",
            "log_level": LogLevel.INFO,
            "enable_audit_log": True,
        },
    )


# =============================================================================
# Example 2: Environment Variables Configuration
# =============================================================================

def env_config_example() -> OpenApiConfig:
    """
    Load configuration from environment variables

    Set these environment variables before running:

    export OPEN_API_ACCOUNT="https://check.business.ru/open-api/v1/"
    export OPEN_API_APP_ID="42"
    export OPEN_API_SECRET="your-secret"
    export OPEN_API_LOG_PATH="./logs"
    export OPEN_API_LOG_LEVEL="info"
    """
    return ConfigLoader().load(env=True)


# =============================================================================
# Example 3: Merged Configuration (File + Environment + Programmatic)
# =============================================================================

def merged_config_example() -> OpenApiConfig:
    """
    Merge configuration from multiple sources
    Priority: programmatic > environment > file
    """
    return ConfigLoader().load(
        file="./config/open_api.json",
        env=True,
        config={"timeout": 60000},
    )


# =============================================================================
# Example 4: Shift and Receipt Workflow
# =============================================================================

def shift_workflow_example(config: OpenApiConfig) -> None:
    """Open a shift, print a receipt, poll its status and close the shift"""
    with OpenClient.from_config(config) as client:
        print(client.get_state_system())

        client.open_shift("Ivanova")

        result = client.print_check({
            "author": "Ivanova",
            "smsEmail54FZ": "buyer@example.com",
            "c_num": "1111222333",
            "payed_cash": 0.00,
            "payed_cashless": 1000.00,
            "goods": [
                {"count": 2, "price": 500, "sum": 1000, "name": "Goods", "nds_value": 20},
            ],
        })
        print(client.data_command_by_id(result["command_id"]))

        print(client.data_commands(CommandFilter(page=1)))

        client.close_shift("Ivanova")


# =============================================================================
# Example 5: Configuration Validation
# =============================================================================

def validation_example() -> None:
    """Validate configuration before use"""
    validator = ConfigValidator()

    partial_config = {
        "account": "check.business.ru/open-api/v1/",
        # Missing app_id and secret...
    }

    result = validator.validate(partial_config)

    if not result.valid:
        print("Configuration validation failed:")
        for error in result.errors:
            print(f"  - {error.field}: {error.message}")


# =============================================================================
# Run Examples
# =============================================================================

if __name__ == "__main__":
    print("=== Open API Configuration Examples ===\n")

    print("1. Configuration Validation:")
    validation_example()
    print()

    print("2. Create Configuration Template:")
    ConfigLoader().create_template("./config/open_api.template.json")
    print("Configuration template created at ./config/open_api.template.json")
