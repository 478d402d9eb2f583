import json
import os
import time

import boa
import requests
import vyper

from scripts.utils import json_file, log

api_url = "https://api.etherscan.io/v2/api"

chain_ids = {
    "eth-mainnet": 1,
    "eth-sepolia": 11155111,
}


contract_base_url = {
    "eth-mainnet": "https://etherscan.io/address/",
    "eth-sepolia": "https://sepolia.etherscan.io/address/",
}


def source_for(artifact):
    """
    Etherscan submission fields describing the source of `artifact`.

    Vyper sources are sent as standard json built by boa. Compiled JSON
    artifacts are sent with the solc input of their hardhat build info,
    found through the `<name>.dbg.json` file next to them.
    """
    if artifact.is_vyper:
        solc_json = boa.load_partial(artifact.path).solc_json
        contract_file = next(iter(solc_json["sources"].keys()))
        return {
            "codeformat": "vyper-json",
            "sourceCode": json.dumps(solc_json),
            "contractname": f"{contract_file}:{artifact.name}",
            "compilerversion": f"vyper:{vyper.__version__}",
        }

    compiled = json_file.load(artifact.path)
    dbg_path = artifact.path[: -len(".json")] + ".dbg.json"
    build_info_path = os.path.join(os.path.dirname(dbg_path), json_file.load(dbg_path)["buildInfo"])
    build_info = json_file.load(build_info_path)
    return {
        "codeformat": "solidity-standard-json-input",
        "sourceCode": json.dumps(build_info["input"]),
        "contractname": f"{compiled['sourceName']}:{compiled['contractName']}",
        "compilerversion": f"v{build_info['solcLongVersion']}",
    }


def is_contract_verified(api_key: str, contract_address: str, chain: str) -> bool:
    """Check if contract is already verified"""
    chain_id = chain_ids.get(chain, chain_ids["eth-mainnet"])

    params = {
        "chainid": chain_id,
        "apikey": api_key,
        "module": "contract",
        "action": "getabi",
        "address": contract_address,
    }

    response = requests.get(api_url, params=params)
    result = response.json()

    return result.get("status") == "1"


def verify_contract(
    api_key: str,
    label: str,
    address: str,
    source: dict,
    chain: str,
    constructor_args: str = "",
    poll_interval: float = 5,
) -> bool:
    """Submits `source` for the contract at `address` and waits for the verdict"""

    log.h3(f"{label}: {contract_base_url[chain]}{address}")

    if is_contract_verified(api_key, address, chain):
        log.h3(f"{label} is already verified")
        return True

    chain_id = chain_ids.get(chain, chain_ids["eth-mainnet"])
    params = {
        "apikey": api_key,
        "module": "contract",
        "action": "verifysourcecode",
        "contractaddress": address,
        "constructorArguements": constructor_args,
        "optimizationUsed": "1",
        "runs": "200",
        "evmversion": "",
        **source,
    }

    try:
        response = requests.post(api_url, params={"chainid": chain_id}, data=params)
        result = response.json()

        if result["status"] != "1":
            log.error(f"Verification submission failed: {result['result']}")
            return False

        guid = result["result"]
        log.h3(f"Verification submitted. GUID: {guid}")

        check_params = {
            "chainid": chain_id,
            "apikey": api_key,
            "module": "contract",
            "action": "checkverifystatus",
            "guid": guid,
        }

        for _ in range(10):
            time.sleep(poll_interval)
            check_result = requests.get(api_url, params=check_params).json()

            if check_result["result"] == "Pass - Verified":
                return True
            if check_result["result"] != "Pending in queue":
                log.error(f"Verification failed: {check_result['result']}")
                if "message" in check_result:
                    log.error(f"Error message: {check_result['message']}")
                return False

        log.error("Verification timed out")
        return False

    except requests.RequestException as e:
        log.error(f"Error during verification: {e}")
        return False
