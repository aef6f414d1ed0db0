"""
Resource kind → presentation category lookup.

Classification is an exact, case-sensitive match against a static table.
Anything not in the table is ``Category.OTHER``.
"""
import os
from types import MappingProxyType
from typing import Mapping, Optional

import yaml

from tfgraph.errors import ConfigError
from tfgraph.models.resource import Category

DEFAULT_CONFIG_FILE = "tfgraph.yaml"

_BUILTIN_TABLE = {
    # Networking
    "aws_vpc":                        Category.NETWORKING,
    "aws_subnet":                     Category.NETWORKING,
    "aws_route_table":                Category.NETWORKING,
    "aws_route_table_association":    Category.NETWORKING,
    "aws_route":                      Category.NETWORKING,
    "aws_internet_gateway":           Category.NETWORKING,
    "aws_nat_gateway":                Category.NETWORKING,
    "aws_eip":                        Category.NETWORKING,
    "aws_network_interface":          Category.NETWORKING,
    "aws_security_group":             Category.NETWORKING,
    "aws_security_group_rule":        Category.NETWORKING,
    "aws_network_acl":                Category.NETWORKING,
    "aws_network_acl_rule":           Category.NETWORKING,
    "aws_vpc_endpoint":               Category.NETWORKING,
    "aws_vpc_peering_connection":     Category.NETWORKING,
    "aws_lb":                         Category.NETWORKING,
    "aws_lb_listener":                Category.NETWORKING,
    "aws_lb_target_group":            Category.NETWORKING,
    "aws_route53_zone":               Category.NETWORKING,
    "aws_route53_record":             Category.NETWORKING,
    "aws_cloudfront_distribution":    Category.NETWORKING,
    "azurerm_virtual_network":        Category.NETWORKING,
    "azurerm_subnet":                 Category.NETWORKING,
    "azurerm_network_security_group": Category.NETWORKING,
    "azurerm_public_ip":              Category.NETWORKING,
    "azurerm_lb":                     Category.NETWORKING,
    "google_compute_network":         Category.NETWORKING,
    "google_compute_subnetwork":      Category.NETWORKING,
    "google_compute_firewall":        Category.NETWORKING,

    # Compute
    "aws_instance":                      Category.COMPUTE,
    "aws_launch_template":               Category.COMPUTE,
    "aws_autoscaling_group":             Category.COMPUTE,
    "aws_lambda_function":               Category.COMPUTE,
    "azurerm_linux_virtual_machine":     Category.COMPUTE,
    "azurerm_windows_virtual_machine":   Category.COMPUTE,
    "azurerm_linux_web_app":             Category.COMPUTE,
    "azurerm_function_app":              Category.COMPUTE,
    "google_compute_instance":           Category.COMPUTE,
    "google_cloudfunctions_function":    Category.COMPUTE,

    # Storage
    "aws_s3_bucket":                  Category.STORAGE,
    "aws_ebs_volume":                 Category.STORAGE,
    "aws_efs_file_system":            Category.STORAGE,
    "azurerm_storage_account":        Category.STORAGE,
    "azurerm_storage_container":      Category.STORAGE,
    "google_storage_bucket":          Category.STORAGE,

    # Database
    "aws_db_instance":                Category.DATABASE,
    "aws_db_subnet_group":            Category.DATABASE,
    "aws_rds_cluster":                Category.DATABASE,
    "aws_dynamodb_table":             Category.DATABASE,
    "aws_elasticache_cluster":        Category.DATABASE,
    "azurerm_mssql_server":           Category.DATABASE,
    "azurerm_mssql_database":         Category.DATABASE,
    "azurerm_cosmosdb_account":       Category.DATABASE,
    "google_sql_database_instance":   Category.DATABASE,

    # Security
    "aws_iam_role":                   Category.SECURITY,
    "aws_iam_policy":                 Category.SECURITY,
    "aws_iam_role_policy_attachment": Category.SECURITY,
    "aws_iam_instance_profile":       Category.SECURITY,
    "aws_kms_key":                    Category.SECURITY,
    "aws_acm_certificate":            Category.SECURITY,
    "aws_secretsmanager_secret":      Category.SECURITY,
    "aws_wafv2_web_acl":              Category.SECURITY,
    "azurerm_key_vault":              Category.SECURITY,
    "azurerm_role_assignment":        Category.SECURITY,
    "google_kms_crypto_key":          Category.SECURITY,
    "google_project_iam_member":      Category.SECURITY,
    "google_service_account":         Category.SECURITY,

    # Analytics
    "aws_kinesis_stream":             Category.ANALYTICS,
    "aws_kinesis_firehose_delivery_stream": Category.ANALYTICS,
    "aws_glue_job":                   Category.ANALYTICS,
    "aws_glue_catalog_database":      Category.ANALYTICS,
    "aws_athena_workgroup":           Category.ANALYTICS,
    "aws_redshift_cluster":           Category.ANALYTICS,
    "aws_emr_cluster":                Category.ANALYTICS,
    "google_bigquery_dataset":        Category.ANALYTICS,
    "google_bigquery_table":          Category.ANALYTICS,

    # Containers
    "aws_ecs_cluster":                Category.CONTAINER,
    "aws_ecs_service":                Category.CONTAINER,
    "aws_ecs_task_definition":        Category.CONTAINER,
    "aws_ecr_repository":             Category.CONTAINER,
    "aws_eks_cluster":                Category.CONTAINER,
    "aws_eks_node_group":             Category.CONTAINER,
    "azurerm_kubernetes_cluster":     Category.CONTAINER,
    "azurerm_container_registry":     Category.CONTAINER,
    "google_container_cluster":       Category.CONTAINER,
    "google_container_node_pool":     Category.CONTAINER,
}


class CategoryClassifier:
    def __init__(self, table: Mapping[str, Category], default: Category = Category.OTHER):
        self._table = MappingProxyType(dict(table))
        self._default = default

    @property
    def table(self) -> Mapping[str, Category]:
        return self._table

    def classify(self, kind: str) -> Category:
        return self._table.get(kind, self._default)

    def with_overrides(self, overrides: Mapping[str, Category]) -> "CategoryClassifier":
        merged = dict(self._table)
        merged.update(overrides)
        return CategoryClassifier(merged, self._default)


DEFAULT_CLASSIFIER = CategoryClassifier(_BUILTIN_TABLE)


def classify(kind: str) -> Category:
    return DEFAULT_CLASSIFIER.classify(kind)


def _parse_category(kind: str, value) -> Category:
    try:
        return Category(str(value).lower())
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        raise ConfigError(
            f"unknown category '{value}' for '{kind}' (expected one of: {allowed})"
        ) from None


def load_classifier(config_path: Optional[str] = None) -> CategoryClassifier:
    """
    Build the classifier for this run.

    Reads ``categories:`` overrides from *config_path*, or from ``tfgraph.yaml``
    in the working directory when no path is given. Without a config file the
    built-in table is used unchanged.
    """
    if config_path is None:
        if not os.path.exists(DEFAULT_CONFIG_FILE):
            return DEFAULT_CLASSIFIER
        config_path = DEFAULT_CONFIG_FILE

    try:
        with open(config_path, "r") as fh:
            config = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read {config_path}: {exc}") from exc

    if config is None:
        return DEFAULT_CLASSIFIER
    if not isinstance(config, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")

    raw = config.get("categories") or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path}: 'categories' must be a mapping of kind to category")

    overrides = {str(kind): _parse_category(kind, value) for kind, value in raw.items()}
    return DEFAULT_CLASSIFIER.with_overrides(overrides)
