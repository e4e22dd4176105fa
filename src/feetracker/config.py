from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    rpc_url: str = "https://nova.arbitrum.io/rpc"
    rpc_rate_per_second: float = 10.0
    rpc_timeout: float = 30.0
    store_dir: str = "store"
    chain_id: int = 42161  # Canonical chain id for empty documents (Arbitrum One)
    reward_distributor_bytecode: str = ""  # Deployed runtime bytecode of the RewardDistributor
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "FEETRACKER_"


settings = Settings()
