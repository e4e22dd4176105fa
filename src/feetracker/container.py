from dependency_injector import containers, providers

from feetracker.block_finder import BlockFinder
from feetracker.config import Settings
from feetracker.detector import DistributorDetector
from feetracker.domain.constants import ScanConfig
from feetracker.infra.http.rate_limited_client import RateLimitedClient
from feetracker.infra.rpc.provider import JsonRpcProvider
from feetracker.store.file_manager import FileManager


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.rpc_rate_per_second,
        timeout=settings.provided.rpc_timeout,
    )

    chain_provider = providers.Singleton(
        JsonRpcProvider,
        rpc_url=settings.provided.rpc_url,
        http_client=http_client,
    )

    file_manager = providers.Singleton(
        FileManager,
        store_dir=settings.provided.store_dir,
        chain_id=settings.provided.chain_id,
    )

    scan_config = providers.Singleton(ScanConfig.from_settings, settings=settings)

    detector = providers.Factory(
        DistributorDetector,
        file_manager=file_manager,
        provider=chain_provider,
        scan_config=scan_config,
    )

    block_finder = providers.Factory(
        BlockFinder,
        file_manager=file_manager,
        provider=chain_provider,
    )
