from cloudant_output_plugin.plugin import (
    CloudantOutputPlugin,
    PluginRegistration,
    FLB_ERROR,
    FLB_OK,
)

__all__ = [
    "CloudantOutputPlugin",
    "PluginRegistration",
    "FLB_ERROR",
    "FLB_OK",
]
