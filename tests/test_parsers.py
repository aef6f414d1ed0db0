"""
Parser tests — verify file discovery and tree normalization on fixtures.
"""
import os
import shutil

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


# --------------------------------------------------------- Terraform
class TestTerraformParser:
    def setup_method(self):
        from tfgraph.parsers import terraform
        self.parser = terraform

    def test_resource_section_folded(self):
        pf = self.parser.parse_file(os.path.join(FIXTURES, "network.tf"))
        assert pf is not None
        section = pf.tree["resource"]
        assert set(section) == {"aws_vpc", "aws_subnet", "aws_security_group"}
        assert isinstance(section["aws_vpc"]["main"], list)
        assert isinstance(section["aws_vpc"]["main"][0], dict)

    def test_output_section_folded(self):
        pf = self.parser.parse_file(os.path.join(FIXTURES, "network.tf"))
        assert set(pf.tree["output"]) == {"vpc_id", "subnet_id"}
        assert "value" in pf.tree["output"]["vpc_id"]

    def test_path_retained(self):
        path = os.path.join(FIXTURES, "app.tf")
        assert self.parser.parse_file(path).path == path

    def test_tf_json(self):
        pf = self.parser.parse_file(os.path.join(FIXTURES, "main.tf.json"))
        assert pf.tree["resource"]["aws_db_instance"]["primary"][0]["engine"] == "postgres"
        assert pf.tree["output"]["db_endpoint"]["description"] == "Database endpoint"

    def test_invalid_file_skipped(self, tmp_path):
        bad = tmp_path / "bad.tf"
        bad.write_text("this is not valid hcl {{{")
        assert self.parser.parse_file(str(bad)) is None

    def test_nonexistent_file_skipped(self):
        assert self.parser.parse_file("/nonexistent/main.tf") is None

    def test_collect_files_sorted_and_filtered(self, tmp_path):
        (tmp_path / "b.tf").write_text("")
        (tmp_path / "a.tf").write_text("")
        (tmp_path / "README.md").write_text("# hi")
        (tmp_path / ".terraform").mkdir()
        (tmp_path / ".terraform" / "cached.tf").write_text("")
        files = self.parser.collect_files([str(tmp_path)])
        assert [os.path.basename(f) for f in files] == ["a.tf", "b.tf"]

    def test_parse_paths(self, tmp_path):
        for name in ("network.tf", "app.tf", "main.tf.json"):
            shutil.copy(os.path.join(FIXTURES, name), tmp_path / name)
        parsed = self.parser.parse_paths([str(tmp_path)])
        assert [os.path.basename(pf.path) for pf in parsed] == ["app.tf", "main.tf.json", "network.tf"]


class TestNormalize:
    def setup_method(self):
        from tfgraph.parsers import terraform
        self.normalize = terraform.normalize

    def test_list_of_blocks(self):
        raw = {
            "resource": [
                {"aws_vpc": {"main": {"cidr_block": "10.0.0.0/16"}}},
                {"aws_vpc": {"spare": {}}},
            ],
            "output": [{"vpc_id": {"value": "${aws_vpc.main.id}"}}],
        }
        tree = self.normalize(raw)
        assert tree["resource"] == {
            "aws_vpc": {"main": [{"cidr_block": "10.0.0.0/16"}], "spare": [{}]},
        }
        assert tree["output"] == {"vpc_id": {"value": "${aws_vpc.main.id}"}}

    def test_quoted_labels(self):
        raw = {"resource": [{'"aws_vpc"': {'"main"': {}}}]}
        assert self.normalize(raw)["resource"] == {"aws_vpc": {"main": [{}]}}

    def test_other_sections_untouched(self):
        raw = {"variable": [{"env": {"default": "dev"}}]}
        assert self.normalize(raw) == raw

    def test_unexpected_section_passed_through(self):
        assert self.normalize({"resource": "oops"}) == {"resource": "oops"}


# --------------------------------------------------------- End to end
class TestFixtureGraph:
    def setup_method(self):
        from tfgraph.extract import engine
        from tfgraph.parsers import terraform
        self.graph = engine.run(terraform.parse_paths([FIXTURES]))

    def _deps(self):
        return {(d.source, d.target): d for d in self.graph.dependencies}

    def test_all_resources_found(self):
        ids = {r.id for r in self.graph.resources}
        assert ids == {
            "aws_vpc.main", "aws_subnet.public", "aws_security_group.web",
            "aws_instance.web", "aws_s3_bucket.assets", "aws_lambda_function.worker",
            "aws_db_instance.primary", "aws_subnet.private", "aws_eks_cluster.main",
        }

    def test_dependencies(self):
        assert set(self._deps()) == {
            ("aws_subnet.public", "aws_vpc.main"),
            ("aws_security_group.web", "aws_vpc.main"),
            ("aws_instance.web", "aws_subnet.public"),
            ("aws_instance.web", "aws_security_group.web"),
            ("aws_db_instance.primary", "aws_security_group.web"),
            ("aws_subnet.private", "aws_vpc.main"),
            ("aws_eks_cluster.main", "aws_subnet.private"),
            ("aws_eks_cluster.main", "aws_subnet.public"),
        }

    def test_property_paths(self):
        deps = self._deps()
        ref = deps[("aws_instance.web", "aws_security_group.web")].references[0]
        assert ref.source_property == "vpc_security_group_ids.0"
        assert ref.target_attribute == "id"
        assert ref.raw_expression == "${aws_security_group.web.id}"
        assert deps[("aws_subnet.public", "aws_vpc.main")].references[0].source_property == "vpc_id"

    def test_dangling_role_reference_dropped(self):
        assert not any(d.source == "aws_lambda_function.worker" for d in self.graph.dependencies)

    def test_outputs_bound(self):
        by_id = {r.id: r for r in self.graph.resources}
        assert set(by_id["aws_vpc.main"].outputs) == {"vpc_id"}
        assert by_id["aws_subnet.public"].outputs["subnet_id"].description == "Public subnet"
        assert set(by_id["aws_db_instance.primary"].outputs) == {"db_endpoint"}

    def test_bare_expressions_resolved(self):
        deps = self._deps()
        ref = deps[("aws_subnet.private", "aws_vpc.main")].references[0]
        assert ref.source_property == "vpc_id"
        assert ref.raw_expression == "${aws_vpc.main.id}"
        eks_refs = deps[("aws_eks_cluster.main", "aws_subnet.public")].references
        assert eks_refs[0].source_property == "vpc_config.0.subnet_ids.1"

    def test_nested_attribute_output_bound(self):
        eks = next(r for r in self.graph.resources if r.id == "aws_eks_cluster.main")
        assert set(eks.outputs) == {"cluster_endpoint", "cluster_ca"}
        assert eks.outputs["cluster_ca"].description == "Cluster CA bundle"

    def test_categories(self):
        by_id = {r.id: r for r in self.graph.resources}
        assert by_id["aws_vpc.main"].category.value == "networking"
        assert by_id["aws_s3_bucket.assets"].category.value == "storage"
        assert by_id["aws_db_instance.primary"].category.value == "database"


# --------------------------------------------------------- Format Detection
class TestFormatDetection:
    def setup_method(self):
        from tfgraph import detect
        self.detect = detect

    def test_tf_extension(self):
        assert self.detect.detect_format("main.tf") == "terraform"

    def test_tf_json_extension(self):
        assert self.detect.detect_format("stack/main.TF.JSON") == "terraform-json"

    def test_plain_json_is_unknown(self):
        assert self.detect.detect_format("package.json") == "unknown"

    def test_unknown_returns_unknown(self):
        assert self.detect.detect_format("random.txt") == "unknown"
