"""Tests for the command line interface."""

import json

from typer.testing import CliRunner

from vault_index.cli.main import app

runner = CliRunner()

VAULT_ADDRESS = "0xa354F35829Ae975e850e23e9615b11Da1B3dC4DE"
OLD_ADDRESS = "0x5f18C75AbDAe578b483E5F43f12a39cF75b973a9"

SNAPSHOT_YAML = f"""
chains:
  1:
    - address: "{VAULT_ADDRESS}"
      name: "USDC yVault"
      symbol: "yvUSDC"
      version: "0.4.3"
      decimals: 6
      price_per_share: "1084533"
      token: {{address: "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", symbol: "USDC", name: "USD Coin", decimals: 6}}
    - address: "{OLD_ADDRESS}"
      name: ""
      symbol: ""
      version: "0.3.0"
      token: {{address: "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", symbol: "USDC", name: "USD Coin", decimals: 6}}
  250:
    - address: "0x0DEC85e74A92c52b7F708c4B10207D9560CEFaf0"
      name: "WFTM yVault"
      symbol: "yvWFTM"
"""

META_YAML = f"""
chains:
  1:
    - address: "{OLD_ADDRESS}"
      display_name: "USDC (legacy)"
      display_symbol: "USDC"
      migration_available: true
      migration_target_vault: "{VAULT_ADDRESS}"
"""


def _write_files(tmp_path):
    snapshot = tmp_path / "vaults.yaml"
    snapshot.write_text(SNAPSHOT_YAML)
    meta = tmp_path / "meta.yaml"
    meta.write_text(META_YAML)
    return snapshot, meta


def test_vaults_json(tmp_path, monkeypatch):
    monkeypatch.delenv("VAULT_INDEX_META_PATH", raising=False)
    snapshot, meta = _write_files(tmp_path)

    result = runner.invoke(app, ["vaults", "--snapshot", str(snapshot), "--meta", str(meta), "--format", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert sorted(data) == ["1", "250"]
    addresses = [vault["address"] for vault in data["1"]]
    assert addresses == sorted(addresses)

    legacy = next(vault for vault in data["1"] if vault["address"] == OLD_ADDRESS.lower())
    assert legacy["display_name"] == "USDC (legacy)"
    assert legacy["formatted_name"] == "USDC (legacy) yVault"
    assert legacy["symbol"] == "USDC"
    assert legacy["formatted_symbol"] == "yvUSDC"
    assert legacy["migration"] == {"available": True, "address": VAULT_ADDRESS.lower()}
    assert legacy["apy"]["net_apy"] == 0.0


def test_vaults_single_chain(tmp_path, monkeypatch):
    monkeypatch.delenv("VAULT_INDEX_META_PATH", raising=False)
    snapshot, _ = _write_files(tmp_path)

    result = runner.invoke(app, ["vaults", "--snapshot", str(snapshot), "--chain", "fantom", "--format", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert list(data) == ["250"]
    assert data["250"][0]["formatted_symbol"] == "yv"


def test_vaults_table(tmp_path, monkeypatch):
    monkeypatch.delenv("VAULT_INDEX_META_PATH", raising=False)
    snapshot, meta = _write_files(tmp_path)

    result = runner.invoke(app, ["vaults", "--snapshot", str(snapshot), "--meta", str(meta)])

    assert result.exit_code == 0, result.output
    assert "Vaults on ethereum" in result.stdout
    assert "Vaults on fantom" in result.stdout


def test_vaults_unknown_chain(tmp_path):
    snapshot, _ = _write_files(tmp_path)

    result = runner.invoke(app, ["vaults", "--snapshot", str(snapshot), "--chain", "nonexistent"])

    assert result.exit_code != 0


def test_vaults_bad_snapshot(tmp_path, monkeypatch):
    monkeypatch.delenv("VAULT_INDEX_META_PATH", raising=False)

    result = runner.invoke(app, ["vaults", "--snapshot", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1


def test_show(tmp_path, monkeypatch):
    snapshot, meta = _write_files(tmp_path)
    monkeypatch.setenv("VAULT_INDEX_META_PATH", str(meta))

    result = runner.invoke(app, ["show", OLD_ADDRESS, "--snapshot", str(snapshot)])

    assert result.exit_code == 0, result.output
    vault = json.loads(result.stdout)
    assert vault["display_symbol"] == "USDC"
    assert vault["migration"]["available"] is True


def test_show_not_found(tmp_path, monkeypatch):
    monkeypatch.delenv("VAULT_INDEX_META_PATH", raising=False)
    snapshot, _ = _write_files(tmp_path)

    result = runner.invoke(app, ["show", "0x0000000000000000000000000000000000000001", "--snapshot", str(snapshot)])

    assert result.exit_code == 1


def test_list_chains():
    result = runner.invoke(app, ["list-chains"])

    assert result.exit_code == 0
    assert "Supported Chains" in result.stdout
    assert "ethereum" in result.stdout


def test_list_chains_json():
    result = runner.invoke(app, ["list-chains", "--format", "json"])

    assert result.exit_code == 0, result.output
    chains = {chain["chain"]: chain for chain in json.loads(result.stdout)}
    assert chains["arbitrum"]["chain_id"] == 42161
    assert chains["arbitrum"]["explorer"] == "https://arbiscan.io"
    assert chains["arbitrum"]["registries"] == ["0x3199437193625DCcD6F9C9e98BDf93582200Eb1f"]


def test_vaults_hidden_and_ordered(tmp_path, monkeypatch):
    """Hidden vaults are left out and the rest follow the curated order."""
    monkeypatch.delenv("VAULT_INDEX_META_PATH", raising=False)
    snapshot, _ = _write_files(tmp_path)
    meta = tmp_path / "ordered.yaml"
    meta.write_text(
        f"""
chains:
  1:
    - address: "{OLD_ADDRESS}"
      order: 2
    - address: "{VAULT_ADDRESS}"
      order: 1
  250:
    - address: "0x0DEC85e74A92c52b7F708c4B10207D9560CEFaf0"
      hide_always: true
"""
    )

    result = runner.invoke(app, ["vaults", "--snapshot", str(snapshot), "--meta", str(meta), "--format", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [vault["address"] for vault in data["1"]] == [VAULT_ADDRESS.lower(), OLD_ADDRESS.lower()]
    assert data["250"] == []
