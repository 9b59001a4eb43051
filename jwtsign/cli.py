"""Command line interface for signing and verifying JWTs."""

import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer

from jwtsign.core.errors import JWTError
from jwtsign.core.logging import setup_logging
from jwtsign.core.settings import JWTSettings
from jwtsign.crypto.algorithms import Algorithm, Family, coerce_algorithm
from jwtsign.crypto.keys import (
    generate_ec_keypair,
    generate_hmac_secret,
    generate_rsa_keypair,
    load_key,
)
from jwtsign.token import jwt
from jwtsign.token.types import SigningOptions

app = typer.Typer(help="Sign and verify JSON Web Tokens")


@app.callback()
def main() -> None:
    """jwtsign CLI entry point."""
    setup_logging(JWTSettings().log_level)


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


def _read_key_file(path: Path) -> str:
    # key files usually end with a newline that is not part of the secret
    text = path.read_text(encoding="utf-8")
    return text[:-1] if text.endswith("\n") else text


def _read_payload(path: Path) -> dict:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"payload is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise typer.BadParameter("payload must be a JSON object")
    return payload


@app.command("sign")
def sign(
    payload_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    key_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    algorithm: Optional[str] = typer.Argument(
        None, help="Signing algorithm (default: JWTSIGN_DEFAULT_ALGORITHM or HS256)"
    ),
    kid: Optional[str] = typer.Option(None, help="Key identifier header"),
    expires_in: Optional[int] = typer.Option(None, help="Seconds until exp"),
    not_before: Optional[int] = typer.Option(None, help="Seconds until nbf"),
    issuer: Optional[str] = typer.Option(None, help="iss claim"),
    audience: Optional[list[str]] = typer.Option(None, help="aud claim, repeatable"),
    subject: Optional[str] = typer.Option(None, help="sub claim"),
    jwt_id: Optional[str] = typer.Option(None, help="jti claim"),
    iat: bool = typer.Option(False, "--iat", help="Stamp the iat claim"),
    passphrase: Optional[str] = typer.Option(None, help="Private key passphrase"),
) -> None:
    """Sign the JSON object in PAYLOAD_FILE with the key in KEY_FILE."""
    settings = JWTSettings()
    payload = _read_payload(payload_file)
    aud: str | list[str] | None = None
    if audience:
        aud = audience[0] if len(audience) == 1 else list(audience)
    options = SigningOptions(
        kid=kid,
        expires_in=expires_in,
        not_before=not_before,
        issuer=issuer,
        audience=aud,
        subject=subject,
        jwt_id=jwt_id,
        issued_at=iat,
    )
    try:
        alg = coerce_algorithm(algorithm or settings.default_algorithm)
        key = None
        if alg.family is not Family.NONE:
            key = load_key(_read_key_file(key_file), alg, password=passphrase)
        token = jwt.encode(payload, key, alg, options=options, settings=settings)
    except JWTError as exc:
        _fail(exc)
    typer.echo(token)


@app.command("verify")
def verify(
    token_file: str = typer.Argument(..., help="File holding the token, or - for stdin"),
    key_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    algorithm: Optional[list[str]] = typer.Option(
        None, "--algorithm", "-a", help="Accepted algorithm, repeatable"
    ),
    issuer: Optional[str] = typer.Option(None, help="Expected iss"),
    audience: Optional[list[str]] = typer.Option(None, help="Accepted aud, repeatable"),
    subject: Optional[str] = typer.Option(None, help="Expected sub"),
    leeway: Optional[float] = typer.Option(None, help="Clock skew tolerance in seconds"),
    require: Optional[list[str]] = typer.Option(None, help="Required claim, repeatable"),
    allow_none: bool = typer.Option(
        False, "--allow-none", help="Accept unsigned alg=none tokens"
    ),
) -> None:
    """Verify a token and print its claims as JSON."""
    settings = JWTSettings()
    if token_file == "-":
        token = sys.stdin.read().strip()
    else:
        try:
            token = Path(token_file).read_text(encoding="utf-8").strip()
        except OSError as exc:
            _fail(exc)

    allowed = list(algorithm or [])
    if allow_none:
        allowed.append(Algorithm.NONE.value)
    if not allowed:
        raise typer.BadParameter("pass at least one --algorithm")
    try:
        signed = [
            alg
            for alg in (coerce_algorithm(name) for name in allowed)
            if alg is not Algorithm.NONE
        ]
        key = None
        if signed:
            # every accepted algorithm is expected to share one key family
            key = load_key(_read_key_file(key_file), signed[0], private=False)
        claims = jwt.decode(
            token,
            key,
            allowed,
            issuer=issuer,
            audience=audience or None,
            subject=subject,
            leeway=leeway,
            require=require or None,
            settings=settings,
        )
    except JWTError as exc:
        _fail(exc)
    typer.echo(json.dumps(claims, ensure_ascii=False))


@app.command("keygen")
def keygen(
    algorithm: str = typer.Argument(..., help="Algorithm the key is meant for"),
    key_size: int = typer.Option(2048, help="RSA modulus size in bits"),
    private_out: Optional[Path] = typer.Option(None, help="Write the private key here"),
    public_out: Optional[Path] = typer.Option(None, help="Write the public key here"),
) -> None:
    """Generate a key suitable for ALGORITHM."""
    try:
        alg = coerce_algorithm(algorithm)
    except JWTError as exc:
        _fail(exc)
    if alg.family is Family.NONE:
        _fail(ValueError("the none algorithm takes no key"))

    if alg.family is Family.HMAC:
        secret = generate_hmac_secret(alg)
        if private_out is not None:
            private_out.write_text(secret + "\n", encoding="utf-8")
        else:
            typer.echo(secret)
        return

    if alg.family is Family.ECDSA:
        data = generate_ec_keypair(alg)
    else:
        data = generate_rsa_keypair(key_size)
    if private_out is not None:
        private_out.write_text(data.private_key_pem, encoding="utf-8")
    if public_out is not None:
        public_out.write_text(data.public_key_pem, encoding="utf-8")
    if private_out is None and public_out is None:
        typer.echo(data.private_key_pem, nl=False)
        typer.echo(data.public_key_pem, nl=False)
    typer.echo(f"kid: {data.kid}", err=True)


if __name__ == "__main__":
    app()
