"""Support types for mutating collected data."""